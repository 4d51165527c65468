import pytest

from teledrop.config import Config

from tests.fakes import CHAT_ID, TOKEN, FakeBotAPI, RecordingProgress


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in ("TELEDROP_BOT_TOKEN", "TELEDROP_CHAT_ID", "TELEDROP_API_BASE"):
        monkeypatch.delenv(name, raising=False)
    # keep a stray .env in the repo from leaking into config tests
    monkeypatch.chdir(tmp_path)


@pytest.fixture
async def bot_api(aiohttp_server):
    api = FakeBotAPI()
    server = await aiohttp_server(api.make_app())
    api.base = str(server.make_url("")).rstrip("/")
    return api


@pytest.fixture
def config(bot_api):
    return Config(bot_token=TOKEN, chat_id=CHAT_ID, api_base=bot_api.base)


@pytest.fixture
def config_file(tmp_path, bot_api):
    path = tmp_path / "config.toml"
    path.write_text(
        f"bot_token = '{TOKEN}'\nchat_id = '{CHAT_ID}'\napi_base = '{bot_api.base}'\n"
    )
    return path


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "file_1.bin"
    path.write_bytes(bytes(range(250)) * 2)
    return path


@pytest.fixture
def progress():
    return RecordingProgress()
