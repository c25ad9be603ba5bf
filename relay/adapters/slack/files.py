"""Slack file fetcher: implements FilePort with aiohttp."""

import aiohttp

from relay.ports.inbound import FileRef


class SlackFileFetcher:
    """Downloads url_private file contents with the bot token."""

    def __init__(self, bot_token: str):
        self._token = bot_token

    async def fetch(self, file: FileRef) -> bytes:
        if not file.url_private:
            raise RuntimeError(f"File {file.name} has no download URL")
        headers = {"Authorization": f"Bearer {self._token}"}
        async with aiohttp.ClientSession() as session:
            async with session.get(file.url_private, headers=headers) as resp:
                if resp.status != 200:
                    raise RuntimeError(f"Failed to download {file.name}: HTTP {resp.status}")
                content_type = resp.content_type or ""
                # Slack answers with its login page when files:read is missing
                if content_type.startswith("text/html") and not file.mimetype.startswith("text/html"):
                    raise RuntimeError(f"File {file.name} returned HTML instead of file data (missing files:read scope?)")
                return await resp.read()
