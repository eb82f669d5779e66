from sqlalchemy import BigInteger, DateTime, func, String
from sqlalchemy.orm import mapped_column, Mapped
from datetime import datetime
from typing_extensions import Annotated

# Primary key types
BigIntegerPrimaryKeyType = Mapped[
    Annotated[int, mapped_column(BigInteger, primary_key=True)]
]
StringPrimaryKeyType = Mapped[Annotated[str, mapped_column(String, primary_key=True)]]

# Normal types
BigIntegerType = Mapped[Annotated[int, mapped_column(BigInteger)]]
StringType = Mapped[Annotated[str, mapped_column(String)]]

# Timestamp types
InsertedAtType = Mapped[
    Annotated[datetime, mapped_column(DateTime(timezone=True), default=func.now())]
]
UpdatedAtType = Mapped[
    Annotated[
        datetime,
        mapped_column(
            DateTime(timezone=True),
            default=func.now(),
            onupdate=func.now(),
        ),
    ]
]
