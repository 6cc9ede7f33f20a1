"""
Error taxonomy shared by the models and the HTTP layer.

Every error is an HTTPException so it propagates untouched from the models
to FastAPI; the application handler renders it as
{"error": {"status", "title", "message"}}.
"""
from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title = "Error"

    def __init__(
        self,
        message: str = "Internal Server Error",
        title: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=self.status_code, detail=message, headers=headers)
        if title is not None:
            self.title = title

    @property
    def message(self) -> str:
        return self.detail

    def to_dict(self) -> dict:
        return {
            "error": {
                "status": self.status_code,
                "title": self.title,
                "message": self.detail,
            }
        }


class AccountNotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "User Not Found"

    def __init__(self, username: str):
        super().__init__(f"No user '{username}' found.")


class AccountExists(ApiError):
    status_code = status.HTTP_409_CONFLICT
    title = "User Already Exists"

    def __init__(self, username: str):
        super().__init__(f"There is already a user with username '{username}'.")


class InvalidCredentials(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Unauthorized"

    def __init__(self):
        super().__init__("Invalid credentials", headers={"WWW-Authenticate": "Basic"})


class NotAccountOwner(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Forbidden"

    def __init__(self):
        super().__init__("You are not allowed to update other users.")


class StoryNotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Story Not Found"

    def __init__(self, story_id: int):
        super().__init__(f"No story with ID '{story_id}' found.")


class NotStoryAuthor(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Forbidden"

    def __init__(self):
        super().__init__(
            "You are not the user who posted this story so you cannot update it."
        )


class InvalidPhoneFormat(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Invalid Input"

    def __init__(self):
        super().__init__("Please input a valid USA phone number.")


class RecoveryInvalid(ApiError):
    """Missing, expired and wrong codes all look the same to the caller."""

    status_code = status.HTTP_400_BAD_REQUEST
    title = "Recovery failed"

    def __init__(self):
        super().__init__("Recovery information is invalid.")


class RecoveryNotConfigured(ApiError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    title = "Service Unavailable"

    def __init__(self):
        super().__init__("Account recovery is not available on this server.")


class InvalidRequestBody(ApiError):
    """Request data that fails schema validation; the message lists every cause."""

    status_code = status.HTTP_400_BAD_REQUEST
    title = "Bad Request"

    def __init__(self, errors: list[dict]):
        causes = []
        for error in errors:
            location = [str(part) for part in error.get("loc", ()) if part != "body"]
            field = ".".join(location)
            causes.append(f"{field}: {error['msg']}" if field else error["msg"])
        super().__init__("; ".join(causes) or "Invalid request.")
