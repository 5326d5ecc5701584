"""Rate service package.

Получение курсов из внешнего API, политика кеширования
и сохранение кеша курсов в локальный JSON-файл.

Публичные точки входа:
- resolver.RateResolver — курс A→B с учётом кеша
- storage.load_store()/save_store() — загрузка и сохранение кеша
"""

from __future__ import annotations

__all__ = [
    "config",
    "api_clients",
    "resolver",
    "storage",
]
