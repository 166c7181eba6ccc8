import os
from typing import Any

from flask import Flask, abort, make_response, request
from flask.typing import ResponseReturnValue
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from hlsplaylist.ads import strip_ads
from hlsplaylist.cli import main
from hlsplaylist.errors import ParseError
from hlsplaylist.m3u8 import (
    MasterPlaylist,
    MediaPlaylist,
    MediaSegment,
    parse_master,
    parse_media,
)

M3U8_CONTENT_TYPE = "application/vnd.apple.mpegurl"

app = Flask("hlsplaylist")
app.config["MAX_CONTENT_LENGTH"] = int(
    os.getenv("HLSPLAYLIST_MAX_PLAYLIST_SIZE", str(2 ** 20))
)
app.cli.add_command(main)
app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1)  # type: ignore


@app.get("/")
def root() -> ResponseReturnValue:
    return {"status": "ok"}


@app.post("/master")
def master() -> ResponseReturnValue:
    playlist = _master_from_request()
    return {
        "renditions": playlist.rendition_names(),
        "variant": playlist.first_variant_uri(),
    }


@app.post("/master/<name>")
def master_rendition(name: str) -> ResponseReturnValue:
    if (uri := _master_from_request().rendition_uri(name)) is not None:
        return {"uri": uri}
    abort(404, "Rendition not found")


@app.post("/media")
def media() -> ResponseReturnValue:
    playlist = _media_from_request()
    return {
        "version": playlist.version,
        "target_duration": playlist.target_duration,
        "media_sequence": playlist.media_sequence,
        "segments": [_serialize_segment(s) for s in playlist.segments],
    }


@app.post("/media/strip")
def media_strip() -> ResponseReturnValue:
    playlist = _media_from_request()
    strip_ads(playlist)
    response = make_response(playlist.dumps())
    response.content_type = M3U8_CONTENT_TYPE
    return response


@app.errorhandler(HTTPException)
def handle_error(error: HTTPException) -> ResponseReturnValue:
    return {
        "error": {"name": error.name.lower(), "description": error.description}
    }, error.code


def _master_from_request() -> MasterPlaylist:
    try:
        return parse_master(request.get_data(as_text=True))
    except ParseError as error:
        abort(422, str(error))


def _media_from_request() -> MediaPlaylist:
    try:
        return parse_media(request.get_data(as_text=True))
    except ParseError as error:
        abort(422, str(error))


def _serialize_segment(segment: MediaSegment) -> dict[str, Any]:
    return {
        "duration": segment.duration,
        "title": segment.title,
        "uri": segment.uri,
        "program_date_time": segment.program_date_time,
    }
