class RecordContractError(ValueError):
    """Raised when a batch contains a record the engine cannot attribute.

    Data-quality problems (missing punches, unparseable hours) never raise;
    only records without an employee or without any date key do.
    """

    def __init__(self, message: str, record_id=None):
        super().__init__(message)
        self.record_id = record_id
