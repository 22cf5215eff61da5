# tests/conftest.py
import pytest

from emoji_search.core.models import EmojiEntry, EmojiKind
from emoji_search.core.search_engine import EmojiSearchEngine
from emoji_search.utils.config_manager import Config
from emoji_search.utils.logger_utils import Log

THUMBSUP = EmojiEntry(
    id="thumbsup",
    kind=EmojiKind.STANDARD,
    render_value="\U0001F44D",
    keywords=("+1", "like", "approve"),
)
ARIGATOU = EmojiEntry(
    id="arigatou",
    kind=EmojiKind.CUSTOM,
    render_value="https://emoji.example/arigatou.png",
    aliases=("thanks", "arigataya"),
)


@pytest.fixture(autouse=True)
def quiet_log():
    """Keep Log lines out of the working tree while tests run."""
    Log.configure(path=None)
    yield
    Log.configure(path=None)


@pytest.fixture
def catalog():
    return {"custom": {"arigatou": ARIGATOU}, "standard": {"thumbsup": THUMBSUP}}


@pytest.fixture
def config():
    return Config(enrich_catalog=False)


@pytest.fixture
def engine(catalog, config):
    return EmojiSearchEngine.from_catalog(catalog["custom"], catalog["standard"], config=config)
