"""Tests for app.services.encoding."""

from unittest.mock import patch

from app.services.encoding import DEFAULT_ENCODING, decode_bytes, decode_document, detect_encoding

_JAPANESE = (
    "吾輩は猫である。名前はまだ無い。どこで生れたかとんと見当がつかぬ。"
    "何でも薄暗いじめじめした所でニャーニャー泣いていた事だけは記憶している。"
    "吾輩はここで始めて人間というものを見た。しかもあとで聞くとそれは書生という"
    "人間中で一番獰悪な種族であったそうだ。"
)


class TestDetectEncoding:
    def test_empty_input_defaults_to_utf8(self):
        assert detect_encoding(b"") == DEFAULT_ENCODING

    def test_utf8_document(self):
        raw = f"<html><body><p>{_JAPANESE}</p></body></html>".encode("utf-8")
        assert detect_encoding(raw) == "utf-8"

    def test_shift_jis_document(self):
        raw = f"<html><body><p>{_JAPANESE * 3}</p></body></html>".encode("shift_jis")
        assert detect_encoding(raw) in {"shift_jis", "cp932"}

    def test_unknown_label_falls_back_to_utf8(self):
        with patch("app.services.encoding.UniversalDetector") as detector_cls:
            detector = detector_cls.return_value
            detector.done = True
            detector.result = {"encoding": "x-made-up-charset", "confidence": 0.9}
            assert detect_encoding(b"abc") == DEFAULT_ENCODING

    def test_inconclusive_detection_falls_back_to_utf8(self):
        with patch("app.services.encoding.UniversalDetector") as detector_cls:
            detector = detector_cls.return_value
            detector.done = False
            detector.result = {"encoding": None, "confidence": 0.0}
            assert detect_encoding(b"abc") == DEFAULT_ENCODING


class TestDecode:
    def test_shift_jis_round_trip_text(self):
        raw = f"<p>{_JAPANESE * 3}</p>".encode("shift_jis")
        text, _ = decode_bytes(raw)
        assert _JAPANESE in text

    def test_malformed_bytes_are_replaced_not_raised(self):
        with patch("app.services.encoding.detect_encoding", return_value="utf-8"):
            text, encoding = decode_bytes(b"ok \xff\xfe end")
        assert encoding == "utf-8"
        assert text == "ok �� end"

    def test_decode_document_keeps_source_url(self):
        doc = decode_document("<p>hello</p>".encode("utf-8"), "https://example.com/a")
        assert doc.text == "<p>hello</p>"
        assert doc.source_url == "https://example.com/a"
        assert doc.detected_encoding in {"ascii", "utf-8"}
