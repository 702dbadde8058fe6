class RecordNotFoundError(ValueError):
    """Raised by write/read models when a referenced row does not exist."""

    def __init__(self, entity: str, record_id) -> None:
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} with UUID {record_id} not found")
