class ClauseWiseError(Exception):
    """Base exception for all ClauseWise errors."""
    pass


class ContractNotFoundError(ClauseWiseError):
    def __init__(self, contract_id: str):
        self.contract_id = contract_id
        super().__init__(f"Contract {contract_id} not found")


class ContractExpiredError(ClauseWiseError):
    def __init__(self, contract_id: str):
        self.contract_id = contract_id
        super().__init__(f"Contract {contract_id} has expired and its file was deleted")


class InvalidStatusTransitionError(ClauseWiseError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move contract from {current!r} to {target!r}")


class UnsupportedFileTypeError(ClauseWiseError):
    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unsupported file type: {content_type}. Only PDF is accepted.")


class FileTooLargeError(ClauseWiseError):
    def __init__(self, size_bytes: int, limit_mb: int):
        self.size_bytes = size_bytes
        self.limit_mb = limit_mb
        super().__init__(f"File is {size_bytes} bytes, the limit is {limit_mb} MB")


class AgreementNotSignedError(ClauseWiseError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("The service agreement must be signed before uploading contracts")


class ReportNotFoundError(ClauseWiseError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Review report {key} not found")


class SuggestionNotFoundError(ClauseWiseError):
    def __init__(self, report_id: str, index: int):
        self.report_id = report_id
        self.index = index
        super().__init__(f"Report {report_id} has no suggestion at index {index}")


class FeedbackAlreadySubmittedError(ClauseWiseError):
    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"Feedback for report {report_id} was already submitted")


class FeedbackNotFoundError(ClauseWiseError):
    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"No feedback submitted for report {report_id}")


class StorageError(ClauseWiseError):
    """Raised when the object storage backend fails."""
    pass


class ExpiredContractFetchError(ClauseWiseError):
    """Raised when the sweeper cannot list expired contracts."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to fetch expired contracts: {reason}")
