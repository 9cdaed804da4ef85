"""
JSON Schema Contract Validators

Модуль для валидации JSON данных согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- book_offer.json (стоящий оффер order book в формате ledger JSON)
- autobridged_offer.json (синтетический autobridged оффер)
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, best_match


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema контрактов офферов.

    По умолчанию читает contracts/schema/ в корне проекта; схема проходит
    meta-validation один раз и кэшируется.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or Path(__file__).resolve().parents[3] / "contracts" / "schema"
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Args:
            schema_name: Имя схемы без расширения ('book_offer', 'autobridged_offer')

        Raises:
            FileNotFoundError: Файл схемы отсутствует
            ValueError: Схема не проходит meta-validation Draft 2020-12
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Проверка ledger JSON оффера против одной схемы."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Raises:
            ValidationError: наиболее релевантная ошибка (best_match), для
                oneOf-сумм это ошибка ближайшей ветви, а не общий oneOf
        """
        error = best_match(self.validator.iter_errors(data))
        if error is not None:
            raise error

    def describe_errors(self, data: Mapping[str, Any]) -> List[str]:
        """Все нарушения в виде '<json path>: <message>', отсортированные по пути."""
        errors = sorted(self.validator.iter_errors(data), key=lambda e: e.json_path)
        return [f"{error.json_path}: {error.message}" for error in errors]


class BookOfferValidator(ContractValidator):
    """Валидатор для book_offer контракта."""

    def __init__(self):
        super().__init__("book_offer")


class AutobridgedOfferValidator(ContractValidator):
    """Валидатор для autobridged_offer контракта."""

    def __init__(self):
        super().__init__("autobridged_offer")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_book_offer(data: Dict[str, Any]) -> None:
    """
    Валидация оффера order book.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    BookOfferValidator().validate(data)


def validate_autobridged_offer(data: Dict[str, Any]) -> None:
    """
    Валидация autobridged оффера.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    AutobridgedOfferValidator().validate(data)
