"""
Исключения движка состояний.

Все ошибки наследуются от BotStateError, чтобы транспорт мог поймать их
одним except и не уронить вебхук.
"""


class BotStateError(Exception):
    """Базовая ошибка botstate."""


class NoActiveUser(BotStateError):
    def __init__(self, state_name: str):
        super().__init__(f"Undefined user to execute state {state_name}.")
        self.state_name = state_name


class UnknownState(BotStateError):
    def __init__(self, state_name: str):
        super().__init__(f"No state to execute with name {state_name}.")
        self.state_name = state_name


class MissingAction(BotStateError):
    def __init__(self, state_name: str):
        super().__init__(f"Method to execute in the {state_name} state is not defined.")
        self.state_name = state_name


class StoreError(BotStateError):
    """Ошибка слоя хранения. Исходное исключение доступно через __cause__."""

    def __init__(self, operation: str, user_id: str, reason: str = ""):
        message = f"Store failed to {operation} for user {user_id}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.operation = operation
        self.user_id = user_id


class EmptyInput(BotStateError):
    def __init__(self) -> None:
        super().__init__("Undefined messages.")
