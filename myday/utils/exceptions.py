class MyDayError(Exception):
    """Base exception for the task assistant service."""


class ConfigurationError(MyDayError):
    pass


class AuthenticationError(MyDayError):
    def __init__(self, detail: str = "Invalid or missing token"):
        super().__init__(detail)


class TaskNotFoundError(MyDayError):
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class ChatNotFoundError(MyDayError):
    def __init__(self, chat_id: int):
        self.chat_id = chat_id
        super().__init__(f"Chat record not found: {chat_id}")


class ValidationError(MyDayError):
    def __init__(self, field: str, detail: str):
        self.field = field
        super().__init__(f"Invalid {field}: {detail}")


class LLMError(MyDayError):
    def __init__(self, provider: str, detail: str):
        self.provider = provider
        super().__init__(f"LLM error ({provider}): {detail}")
