import requests
from dataclasses import dataclass
from typing import Any, Dict, Optional

from utils.logger import get_logger

logger = get_logger(__name__)

class SongInfoError(Exception):
    """外部の楽曲情報APIに関するエラーの基底クラス"""

class LookupUnavailableError(SongInfoError):
    """ネットワーク障害・タイムアウトなどで応答を得られなかった"""

class LookupRejectedError(SongInfoError):
    """APIが 200 以外を返した (status_code はそのまま呼び出し元へ転送する)"""

    def __init__(self, status_code: int):
        super().__init__(f"Lookup API returned HTTP {status_code}")
        self.status_code = status_code

class LookupDecodeError(SongInfoError):
    """応答ボディが期待する JSON ではなかった"""

@dataclass
class SongDetail:
    release_date: str
    text: str
    link: str

    @classmethod
    def from_payload(cls, payload: Any) -> "SongDetail":
        if not isinstance(payload, dict):
            raise LookupDecodeError(f"Expected a JSON object, got {type(payload).__name__}")

        values: Dict[str, str] = {}
        for key in ("releaseDate", "text", "link"):
            value = payload.get(key)
            if not isinstance(value, str):
                raise LookupDecodeError(f"Field '{key}' missing or not a string")
            values[key] = value

        return cls(release_date=values["releaseDate"], text=values["text"], link=values["link"])

class SongInfoClient:
    """
    楽曲情報API (GET {base_url}/info?group=..&song=..) のクライアント。
    requests.Session を1つ保持し、プロセス全体で共有する。
    """

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    @property
    def info_url(self) -> str:
        return f"{self.base_url}/info"

    def fetch_info(self, group: str, song: str) -> SongDetail:
        # params 経由で渡すので値はパーセントエンコードされる
        params = {"group": group, "song": song}

        try:
            response = self.http.get(self.info_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Failed to call external API ({group} - {song}): {e}")
            raise LookupUnavailableError(str(e)) from e

        try:
            if response.status_code != 200:
                logger.warning(f"External API returned {response.status_code} for: {group} - {song}")
                raise LookupRejectedError(response.status_code)

            try:
                payload = response.json()
            except ValueError as e:
                logger.error(f"Failed to decode response: {e}")
                raise LookupDecodeError(str(e)) from e

            try:
                return SongDetail.from_payload(payload)
            except LookupDecodeError as e:
                logger.error(f"Failed to decode response: {e}")
                raise
        finally:
            response.close()

    def close(self):
        self.http.close()
