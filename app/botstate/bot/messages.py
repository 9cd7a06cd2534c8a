"""Тексты сообщений демонстрационного диалога."""

ASK_NAME = "Hi! What is your name?"
EMPTY_NAME = "Please send your name as plain text."
ASK_AGE = "Nice to meet you, {name}. How old are you?"
BAD_AGE = "Age must be a whole number from 1 to 150. Try again."
SUMMARY = "Thanks! {name}, {age} years old. Send anything to start over."
UNKNOWN = "Something went wrong. Send /start to begin again."
