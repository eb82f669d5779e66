import pytest
from sqlalchemy import create_engine

from utils.models.general_models import Base
from utils.session import Session

# Registers nft_mints on Base.metadata
from processors.nft_mint.models.nft_mint_models import NFTMint  # noqa: F401


@pytest.fixture
def sqlite_session():
    # SQLite has no schemas, so the placeholder schema is dropped
    engine = create_engine("sqlite://").execution_options(
        schema_translate_map={"per_schema": None}
    )
    Base.metadata.create_all(engine)
    Session.configure(bind=engine)
    yield Session
    Session.configure(bind=None)
    Base.metadata.drop_all(engine)
    engine.dispose()
