"""Errors raised by the GitHub profile source."""

from __future__ import annotations


ExtraInfoType = dict[str, str | None]


class GitHubClientError(Exception):
    """A failed call to the GitHub REST API."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join(f"{key}: {value}" for key, value in extra_info.items() if value is not None) + ")"
        super().__init__(msg)
        self.extra_info: ExtraInfoType = extra_info or {}


class RequestError(GitHubClientError):
    """Any GitHub failure that is neither a missing resource nor a rate limit."""

    def __init__(
        self,
        action: str,
        message: str | None = None,
        status_code: int | None = None,
        extra_info: ExtraInfoType | None = None,
    ):
        self.action = action
        self.status_code = status_code
        super().__init__(
            message=message or "A GitHub request error occurred.",
            extra_info={"action": action, **(extra_info or {})},
        )


class ResourceNotFoundError(RequestError):
    """GitHub answered 404 for the requested user, repository or path."""

    def __init__(self, action: str, resource: str | None = None):
        self.resource = resource
        super().__init__(
            action=action,
            message="The resource could not be found.",
            status_code=404,
            extra_info={"resource": resource},
        )


class RateLimitError(RequestError):
    """GitHub refused the call because the request quota is exhausted."""

    def __init__(self, action: str, status_code: int | None = None, reset_at: str | None = None):
        self.reset_at = reset_at
        super().__init__(
            action=action,
            message="The GitHub rate limit has been exceeded.",
            status_code=status_code,
            extra_info={"reset_at": reset_at},
        )
