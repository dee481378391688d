"""
JSON Schema Contract Validators

Валидация документов, которые пересекают границу ядра (хост ↔ ledger):
- ledger_snapshot.json: снапшот состояния (persistence hook)
- ledger_event.json: запись события для внешних наблюдателей

Схемы лежат в пакете (contracts/schema/) и проверяются на корректность
(meta-validation) при загрузке.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов из contracts/schema/.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'ledger_snapshot')

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)


class LedgerSnapshotValidator(ContractValidator):
    def __init__(self):
        super().__init__("ledger_snapshot")


class LedgerEventValidator(ContractValidator):
    def __init__(self):
        super().__init__("ledger_event")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


@lru_cache(maxsize=None)
def _snapshot_validator() -> LedgerSnapshotValidator:
    return LedgerSnapshotValidator()


@lru_cache(maxsize=None)
def _event_validator() -> LedgerEventValidator:
    return LedgerEventValidator()


def validate_ledger_snapshot(data: Dict[str, Any]) -> None:
    """
    Валидация документа снапшота.

    Raises:
        jsonschema.ValidationError: Если документ не соответствует схеме
    """
    _snapshot_validator().validate(data)


def validate_event_record(data: Dict[str, Any]) -> None:
    """
    Валидация записи события (LedgerEvent.to_record()).

    Raises:
        jsonschema.ValidationError: Если запись не соответствует схеме
    """
    _event_validator().validate(data)
