import math


def calculate_reading_time(text: str, words_per_minute: int = 200) -> str:
    words = text.split()
    minutes = math.ceil(len(words) / words_per_minute) or 1
    return f"{minutes} min"
