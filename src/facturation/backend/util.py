# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import enum
from datetime import date, timedelta
from decimal import Decimal
from typing import NamedTuple, Optional, cast


class Amount(NamedTuple):
    pre_tax: Decimal = Decimal(0)
    tax: Decimal = Decimal(0)
    including_tax: Decimal = Decimal(0)

    def __add__(self, other: "Amount") -> "Amount":  # type: ignore[override]
        if not isinstance(other, Amount):
            raise ValueError(f"{other} shall be an Amount instance!")
        return Amount(
            pre_tax=self.pre_tax + other.pre_tax,
            tax=self.tax + other.tax,
            including_tax=self.including_tax + other.including_tax,
        )

    def __iadd__(self, other: "Amount") -> "Amount":  # type: ignore[override]
        return self.__add__(other)

    def __neg__(self) -> "Amount":
        return Amount(
            pre_tax=-self.pre_tax,
            tax=-self.tax,
            including_tax=-self.including_tax,
        )


class Period(NamedTuple):
    start: date = date(1970, 1, 1)
    end: Optional[date] = None

    @property
    def last_day(self) -> date:
        # An open period ends today.
        return date.today() if self.end is None else self.end

    @classmethod
    def from_quarter(cls, year: int, quarter: int) -> "Period":
        last_day = 31 if quarter in (1, 4) else 30
        return cls(
            date(year, 1 + (quarter - 1) * 3, 1),
            date(year, quarter * 3, last_day)
        )

    @classmethod
    def from_current_month(cls) -> "Period":
        end = date.today()
        return cls(end.replace(day=1), end)

    @classmethod
    def from_last_month(cls) -> "Period":
        end = date.today().replace(day=1) - timedelta(days=1)
        return cls(end.replace(day=1), end)

    @classmethod
    def from_current_quarter(cls) -> "Period":
        end = date.today()
        quarter = (end.month - 1) // 3 + 1
        return cls(date(end.year, 1 + (quarter - 1) * 3, 1), end)

    @classmethod
    def from_last_quarter(cls) -> "Period":
        today = date.today()
        quarter = (today.month - 1) // 3 + 1
        if quarter == 1:
            return cls.from_quarter(today.year - 1, 4)
        return cls.from_quarter(today.year, quarter - 1)

    @classmethod
    def from_current_year(cls) -> "Period":
        end = date.today()
        return cls(end.replace(day=1, month=1), end)

    @classmethod
    def from_last_year(cls) -> "Period":
        end = date.today().replace(day=1, month=1) - timedelta(days=1)
        return cls(end.replace(day=1, month=1), end)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, date):
            return self.start <= item <= self.last_day
        raise ValueError("Item shall be a date instance")


class PeriodFilter(enum.Enum):
    CURRENT_MONTH = enum.auto()
    CURRENT_QUARTER = enum.auto()
    CURRENT_YEAR = enum.auto()
    LAST_MONTH = enum.auto()
    LAST_QUARTER = enum.auto()
    LAST_YEAR = enum.auto()

    def as_period(self) -> Period:
        method = f"from_{self.name.lower()}"
        return cast(Period, getattr(Period, method)())
