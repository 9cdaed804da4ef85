"""
Contract errors — нарушения предусловий на границах операций.

Все ошибки здесь — это нарушения входного контракта, а не recoverable
runtime-состояния. Операция, получившая невалидные данные, прерывается
немедленно: никаких частичных восстановлений и молчаливых приведений.

Иерархия наследуется от ValueError, чтобы вызывающий код мог ловить
как конкретный тип, так и общий ValueError.
"""


class ContractViolation(ValueError):
    """Базовое нарушение входного контракта."""


class InvalidAmount(ContractViolation):
    """
    Невалидная сумма.

    Примеры: нечисловое значение, NaN/Inf, смешивание разных активов
    в сложении/сравнении, деление на ноль, отрицательный leftover.
    """


class InvalidAccount(ContractViolation):
    """Невалидный идентификатор аккаунта (base58check не проходит)."""


class InvalidOffer(ContractViolation):
    """
    Невалидная форма оффера.

    Например, leg-one оффер без issued TakerPays или с не-native TakerGets.
    """
