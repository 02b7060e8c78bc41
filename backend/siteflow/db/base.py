from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# Register every table on Base.metadata.
import siteflow.models  # noqa: E402,F401
