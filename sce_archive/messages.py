"""
User-facing message catalog.

Keys are stable identifiers used by ArchiveError subclasses; values are
str.format templates. Unknown locales fall back to English.
"""

from typing import Any

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        # Validation
        "validation.required_field": "Field '{field}' is required",
        "validation.password_mismatch": "Passwords do not match",
        "validation.invalid_token": "Invalid or expired verification token",
        "validation.unknown_field": "Field '{field}' cannot be updated",
        "validation.invalid_value": "Field '{field}' has an invalid value",
        "validation.wrong_current_password": "Current password is incorrect",
        "validation.invalid_request": "Request validation failed",
        # Duplicates
        "duplicate.email": "This email is already in use",
        "duplicate.username": "This username is already taken",
        "duplicate.external_number": "Object SCE-{value} already exists",
        "duplicate.generic": "A record with this {field} already exists",
        # Not found
        "not_found.account": "Account not found",
        "not_found.content_record": "Object not found",
        "not_found.post": "Post not found",
        "not_found.generic": "{entity} not found",
        # Forbidden
        "forbidden.not_authenticated": "You must be logged in",
        "forbidden.insufficient_role": "You do not have permission to {action}",
        "forbidden.insufficient_clearance": "Access denied. Clearance level {required} is required",
        "forbidden.self_modification": "You cannot change your own {field}",
        "forbidden.email_not_verified": "Please verify your email address before logging in",
        # Credentials
        "credential.invalid": "Invalid email or password",
        "credential.invalid_refresh": "Invalid or expired refresh token",
        "credential.invalid_token": "Invalid or expired access token",
    },
    "ru": {
        "validation.required_field": "Поле '{field}' обязательно",
        "validation.password_mismatch": "Пароли не совпадают",
        "validation.invalid_token": "Неверный или истекший токен",
        "validation.unknown_field": "Поле '{field}' нельзя изменить",
        "validation.invalid_value": "Недопустимое значение поля '{field}'",
        "validation.wrong_current_password": "Текущий пароль неверен",
        "validation.invalid_request": "Ошибка проверки запроса",
        "duplicate.email": "Этот email уже используется",
        "duplicate.username": "Это имя пользователя уже занято",
        "duplicate.external_number": "Объект SCE-{value} уже существует",
        "duplicate.generic": "Запись с таким значением поля {field} уже существует",
        "not_found.account": "Пользователь не найден",
        "not_found.content_record": "Объект не найден",
        "not_found.post": "Публикация не найдена",
        "not_found.generic": "{entity}: запись не найдена",
        "forbidden.not_authenticated": "Вы должны войти в систему",
        "forbidden.insufficient_role": "У вас нет прав: {action}",
        "forbidden.insufficient_clearance": "Доступ запрещен. Требуется уровень доступа {required}",
        "forbidden.self_modification": "Вы не можете изменить свое поле: {field}",
        "forbidden.email_not_verified": "Пожалуйста, подтвердите свой адрес электронной почты перед входом в систему",
        "credential.invalid": "Неверный email или пароль",
        "credential.invalid_refresh": "Неверный или истекший токен обновления",
        "credential.invalid_token": "Неверный или истекший токен доступа",
    },
}


def render_message(key: str, locale: str = DEFAULT_LOCALE, **params: Any) -> str:
    """Look up a message template and fill in its parameters."""
    catalog = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    template = catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        return template
