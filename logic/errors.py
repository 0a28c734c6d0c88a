# backend/logic/errors.py


class LearningError(Exception):
    """Base class for errors reported back to the API caller"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LearningError):
    status_code = 400


class ConflictError(LearningError):
    status_code = 400


class NotFoundError(LearningError):
    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id
