# SPDX-License-Identifier: MIT

from __future__ import annotations

from typing import List, Union

Snowflake = Union[str, int]
SnowflakeList = List[Snowflake]
