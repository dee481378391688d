"""
Core domain models, checked arithmetic, contracts and error taxonomy.

Модуль не зависит от хоста (runtime, storage, доставка событий).
"""
