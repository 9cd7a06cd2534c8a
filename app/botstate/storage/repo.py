from typing import Mapping

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from botstate.logging import logger
from botstate.storage.models import UserState, UserField


class Repository:
    def __init__(self, session: Session):
        self.session = session

    def get_user_state(self, user_id: str) -> UserState | None:
        return self.session.get(UserState, user_id)

    def upsert_user_state(self, user_id: str, **values: str) -> UserState:
        """Создать или обновить строку состояния пользователя."""
        user_state = self.session.get(UserState, user_id)

        if user_state is None:
            user_state = UserState(user_id=user_id, current_state="", state_with_callback="")
            self.session.add(user_state)
            logger.info("New user state created: user_id=%s", user_id)

        for name, value in values.items():
            setattr(user_state, name, value)

        self.session.commit()
        return user_state

    def get_field(self, user_id: str, key: str) -> str:
        stmt = select(UserField.value).where(UserField.user_id == user_id, UserField.key == key)
        value = self.session.execute(stmt).scalar_one_or_none()
        return value or ""

    def get_fields(self, user_id: str) -> dict[str, str]:
        stmt = select(UserField.key, UserField.value).where(UserField.user_id == user_id)
        return {key: value for key, value in self.session.execute(stmt)}

    def set_fields(self, user_id: str, values: Mapping[str, str]) -> None:
        """Записать поля пользователя; существующие ключи перезаписываются."""
        if self.session.get(UserState, user_id) is None:
            self.session.add(UserState(user_id=user_id, current_state="", state_with_callback=""))
            # строка состояния нужна раньше полей из-за внешнего ключа
            self.session.flush()

        existing = {
            field.key: field
            for field in self.session.execute(
                select(UserField).where(UserField.user_id == user_id, UserField.key.in_(list(values)))
            ).scalars()
        }
        for key, value in values.items():
            field = existing.get(key)
            if field is None:
                self.session.add(UserField(user_id=user_id, key=key, value=value))
            else:
                field.value = value

        self.session.commit()

    def delete_user(self, user_id: str) -> bool:
        """Удалить пользователя со всеми полями. Возвращает True, если он был."""
        self.session.execute(delete(UserField).where(UserField.user_id == user_id))
        result = self.session.execute(delete(UserState).where(UserState.user_id == user_id))
        self.session.commit()
        return result.rowcount > 0
