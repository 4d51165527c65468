"""Fake Bot API server and progress recorder shared by the tests."""

import json

from aiohttp import web


TOKEN = "T"
CHAT_ID = "42"

UPLOAD_OK = {"ok": True, "result": {"document": {"file_id": "ABC123"}}}
GET_FILE_OK = {"ok": True, "result": {"file_path": "documents/file_1.bin"}}


class FakeBotAPI:
    """Just enough of the Bot API to answer sendDocument and getFile."""

    def __init__(self):
        self.base = ""
        self.upload_status = 200
        self.upload_body = json.dumps(UPLOAD_OK)
        self.get_file_body = json.dumps(GET_FILE_OK)
        self.uploads = []
        self.lookups = []

    async def send_document(self, request: web.Request) -> web.Response:
        reader = await request.multipart()
        part = await reader.next()
        data = await part.read(decode=False)
        self.uploads.append({
            "chat_id": request.query.get("chat_id"),
            "name": part.name,
            "filename": part.filename,
            "content_type": part.headers.get("Content-Type"),
            "data": bytes(data),
        })
        return web.Response(
            text=self.upload_body,
            status=self.upload_status,
            content_type="application/json",
        )

    async def get_file(self, request: web.Request) -> web.Response:
        self.lookups.append({
            "content_type": request.content_type,
            "body": await request.json(),
        })
        return web.Response(text=self.get_file_body, content_type="application/json")

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post(f"/bot{TOKEN}/sendDocument", self.send_document)
        app.router.add_post(f"/bot{TOKEN}/getFile", self.get_file)
        return app


class RecordingProgress:
    def __init__(self):
        self.events = []

    def on_progress(self, sent, total):
        self.events.append(("progress", sent, total))

    def on_complete(self, total):
        self.events.append(("complete", total))

    def on_failure(self, error):
        self.events.append(("failure", error))


