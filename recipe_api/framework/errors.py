class RecipeApiError(Exception):
    """
    Base class for errors the API answers with a `{"message": ...}` body.
    """

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RecipeValidationError(RecipeApiError):
    """
    Input rejected before anything was written.
    """

    status_code = 400
    message = "Invalid recipe"

    def __init__(self, missing_fields=None, message: str | None = None):
        self.missing_fields = list(missing_fields or [])
        if message is None and self.missing_fields:
            message = "Missing required fields: " + ", ".join(self.missing_fields)
        super().__init__(message)


class RecipeNotFound(RecipeApiError):
    status_code = 404
    message = "Recipe not found"

    def __init__(self, recipe_id: str):
        self.recipe_id = recipe_id
        super().__init__()


class StorageError(RecipeApiError):
    """
    The backing store failed. The caller only ever sees the generic message;
    the driver error is kept on `operation` / `__cause__` for the logs.
    """

    status_code = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__()


def describe_validation_errors(errors) -> str:
    """
    Flattens pydantic / FastAPI error dicts into one line,
    e.g. "Invalid fields: title (Input should be a valid string)".
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p != "body"]
        name = ".".join(loc) or "body"
        parts.append(f"{name} ({error.get('msg', 'invalid')})")
    return "Invalid fields: " + ", ".join(parts)
