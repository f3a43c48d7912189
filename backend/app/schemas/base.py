"""
Shared field types for API schemas.
"""

from decimal import Decimal
from typing import Any

from pydantic_core import core_schema


class Money(Decimal):
    """Money field that always serializes as float"""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        def validate_money(value: Any) -> Decimal:
            if isinstance(value, Decimal):
                money = value
            elif isinstance(value, (int, float, str)):
                money = Decimal(str(value))
            else:
                raise ValueError(f"Cannot convert {type(value)} to Money")
            if money < 0:
                raise ValueError("Amount cannot be negative")
            return money.quantize(Decimal("0.01"))

        return core_schema.no_info_after_validator_function(
            validate_money,
            core_schema.union_schema(
                [
                    core_schema.int_schema(),
                    core_schema.float_schema(),
                    core_schema.str_schema(),
                    core_schema.is_instance_schema(Decimal),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                float,
                info_arg=False,
                return_schema=core_schema.float_schema(),
            ),
        )
