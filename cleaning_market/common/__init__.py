# cleaning_market/common/__init__.py
"""
Общие утилиты: константы, логирование, доменные ошибки.
"""
