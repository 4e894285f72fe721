"""HTTP surface — Flask app exposing generation, cleanup, and collaborators.

Routes:
  POST   /api/generate-isl-video      {sentence} -> {success, videoUrl, message}
  DELETE /api/delete-generated-videos            -> {success, message, deletedFiles}
  POST   /api/transcribe              {audioDataUri, sourceLanguage, translate?}
  POST   /api/translate               {text, sourceLanguage} -> {englishText, cleanedText}
  GET    <output.url_prefix>/<name>   generated video files

Errors are JSON bodies {error, type, details}. One SignVideoGenerator is
shared by all requests; each request drives it on its own event loop.
"""

import asyncio
import logging

from flask import Flask, current_app, jsonify, request, send_from_directory

from . import transcribe as transcribe_mod
from .errors import CatalogUnavailable, GenerationError, OutputDirectoryUnavailable
from .generator import SignVideoGenerator
from .normalize import clean_text
from .translate import TranslationUnavailable, UnsupportedLanguage, translate_if_necessary

logger = logging.getLogger(__name__)


def _error(message, type_, details, status):
    return jsonify({"error": message, "type": type_, "details": details}), status


def _status_for(error: GenerationError) -> int:
    if error.user_error:
        return 422
    if isinstance(error, (CatalogUnavailable, OutputDirectoryUnavailable)):
        return 503
    return 500


def create_app(config: dict, generator=None, translation_backend=None) -> Flask:
    """Build the Flask app.

    Args:
        config: Normalized config (see config.load_config).
        generator: Shared SignVideoGenerator; built from config if None.
        translation_backend: Callable(text, language) -> English text,
            used for non-English typed input.
    """
    app = Flask(__name__)
    app.config["ISL"] = config
    app.extensions["isl_generator"] = generator or SignVideoGenerator.from_config(config)
    app.extensions["isl_translation_backend"] = translation_backend

    url_prefix = config["output"]["url_prefix"]

    @app.post("/api/generate-isl-video")
    def generate_isl_video():
        body = request.get_json(silent=True) or {}
        sentence = body.get("sentence")
        if not sentence or not isinstance(sentence, str):
            return _error(
                "No sentence provided", "ValidationError",
                "The request must include a sentence to convert to ISL video", 400,
            )

        gen = current_app.extensions["isl_generator"]
        try:
            result = asyncio.run(gen.generate(sentence))
        except GenerationError as e:
            return jsonify(e.to_dict()), _status_for(e)

        video_url = f"{url_prefix}/{result.output_path.name}"
        logger.info("Video generated successfully: %s", video_url)
        return jsonify({
            "success": True,
            "videoUrl": video_url,
            "message": "ISL video generated successfully",
            "unresolvedWords": result.unresolved,
        })

    @app.delete("/api/delete-generated-videos")
    def delete_generated_videos():
        gen = current_app.extensions["isl_generator"]
        report = gen.cleanup()
        if not report.directory_found:
            return jsonify({
                "success": False,
                "message": "Generated videos directory not found",
            }), 404
        return jsonify({
            "success": True,
            "message": f"Successfully deleted {report.count} videos",
            "deletedFiles": report.deleted_files,
        })

    @app.post("/api/transcribe")
    def transcribe_audio():
        body = request.get_json(silent=True) or {}
        try:
            text = transcribe_mod.transcribe_data_uri(
                body.get("audioDataUri", ""),
                language=body.get("sourceLanguage", "English"),
                model=config["transcribe"]["model"],
                translate=bool(body.get("translate", False)),
            )
        except (transcribe_mod.TranscriptionError, UnsupportedLanguage) as e:
            return _error("Transcription failed", type(e).__name__, str(e), 400)
        except RuntimeError as e:
            return _error("Transcription unavailable", "TranscriptionUnavailable", str(e), 501)
        return jsonify({"transcription": text})

    @app.post("/api/translate")
    def translate_text():
        body = request.get_json(silent=True) or {}
        text = body.get("text")
        if not isinstance(text, str):
            return _error(
                "No text provided", "ValidationError",
                "The request must include text to translate", 400,
            )
        try:
            english = translate_if_necessary(
                text, body.get("sourceLanguage", "English"),
                backend=current_app.extensions["isl_translation_backend"],
            )
        except UnsupportedLanguage as e:
            return _error("Translation failed", "UnsupportedLanguage", str(e), 400)
        except TranslationUnavailable as e:
            return _error("Translation unavailable", "TranslationUnavailable", str(e), 501)
        return jsonify({"englishText": english, "cleanedText": clean_text(english)})

    @app.get(f"{url_prefix}/<path:name>")
    def generated_video(name):
        return send_from_directory(config["output"]["dir"], name)

    return app
