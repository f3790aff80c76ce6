from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from flask import Flask, Response, current_app, jsonify, request, send_file

from qr_svg.errors import PayloadTooLarge
from qr_svg.generator import download_filename, generate_qr

logger = logging.getLogger(__name__)

SVG_MIMETYPE = "image/svg+xml"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class SvgRequest:
    data: str
    dark: bool
    module_size: int
    download: bool
    title: str

    @staticmethod
    def _parse_flag(payload: Mapping[str, object], key: str) -> bool:
        raw_value = payload.get(key, False)
        if isinstance(raw_value, bool):
            return raw_value
        return str(raw_value).strip().lower() in _TRUE_VALUES

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, object], default_module_size: int = 8, max_module_size: int = 64
    ) -> "SvgRequest":
        data = str(payload.get("data") or "").strip()
        if not data:
            raise ValueError("Please provide the text to encode.")

        try:
            module_size = int(payload.get("moduleSize", default_module_size))
        except (TypeError, ValueError) as exc:
            raise ValueError("moduleSize must be an integer.") from exc
        if not 1 <= module_size <= max_module_size:
            raise ValueError(f"moduleSize must be between 1 and {max_module_size}.")

        return cls(
            data=data,
            dark=cls._parse_flag(payload, "dark"),
            module_size=module_size,
            download=cls._parse_flag(payload, "download"),
            title=str(payload.get("title") or ""),
        )


def create_app(config: Optional[Mapping[str, object]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(QR_MODULE_SIZE=8, QR_MAX_MODULE_SIZE=64)
    app.config.from_prefixed_env()
    if config:
        app.config.from_mapping(config)

    @app.route("/api/qr-svg", methods=["GET", "POST"])
    def qr_svg():
        if request.method == "GET":
            payload: Dict[str, object] = {key: value for key, value in request.args.items()}
        else:
            payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            payload = {}

        try:
            svg_request = SvgRequest.from_payload(
                payload,
                default_module_size=int(current_app.config["QR_MODULE_SIZE"]),
                max_module_size=int(current_app.config["QR_MAX_MODULE_SIZE"]),
            )
            svg_text = generate_qr(
                svg_request.data, dark=svg_request.dark, module_size=svg_request.module_size
            )
        except PayloadTooLarge as exc:
            logger.info("Rejected oversized payload: %s", exc)
            return jsonify({"message": str(exc)}), 413
        except ValueError as exc:
            logger.info("Rejected QR request: %s", exc)
            return jsonify({"message": str(exc)}), 400

        if not svg_request.download:
            return Response(svg_text, mimetype=SVG_MIMETYPE)

        buffer = io.BytesIO(svg_text.encode("utf-8"))
        buffer.seek(0)
        return send_file(
            buffer,
            as_attachment=True,
            download_name=download_filename(svg_request.title),
            mimetype=SVG_MIMETYPE,
        )

    return app


app = create_app()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    app.run(host="0.0.0.0", port=5000, debug=True)
