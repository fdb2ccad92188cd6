"""
Tests for the archive, manifest and print exporters.
"""

import json
import zipfile

import pytest
from PIL import Image

from conftest import make_png
from vocabart.cards.faces import FACE_HEIGHT, FACE_WIDTH, card_color, render_back, render_front
from vocabart.cards.model import Card
from vocabart.errors import EmptyDeckError
from vocabart.export.archive import archive_entries, export_archive
from vocabart.export.manifest import build_manifest, export_manifest, load_manifest
from vocabart.export.print_export import PAGE_HEIGHT_PX, PAGE_WIDTH_PX, export_print_pdf, render_pages
from vocabart.utils.image import decode_data_uri, open_data_uri, safe_filename, to_data_uri


class TestImageUtils:
    """Test data URI and filename helpers."""

    def test_safe_filename(self):
        assert safe_filename("Ice Cream!") == "ice_cream_"
        assert safe_filename("Café") == "caf_"
        assert safe_filename("abc123") == "abc123"

    def test_decode_data_uri(self, png_bytes):
        mime, raw = decode_data_uri(to_data_uri(png_bytes, "image/png"))
        assert mime == "image/png"
        assert raw == png_bytes

    @pytest.mark.parametrize("uri", ["", "N/A", "http://example.com/a.png", "data:text/plain,hello"])
    def test_decode_rejects_non_base64(self, uri):
        with pytest.raises(ValueError):
            decode_data_uri(uri)

    def test_open_data_uri(self, png_data_uri):
        img = open_data_uri(png_data_uri)
        assert img.mode == "RGB"
        assert img.size == (32, 24)

    def test_open_unreadable_image(self):
        assert open_data_uri(to_data_uri(b"not an image")) is None
        assert open_data_uri(None) is None


class TestArchive:
    """Test the zip export."""

    def test_entries_named_from_term(self, png_bytes, png_data_uri):
        cards = [
            Card("Ice Cream", "cold dessert", image=png_data_uri),
            Card("pending", "no image yet"),
            Card("photo", "a picture", image=to_data_uri(b"jpegbytes", "image/jpeg")),
        ]

        entries = dict(archive_entries(cards))

        assert set(entries) == {"ice_cream.png", "photo.jpg"}
        assert entries["ice_cream.png"] == png_bytes

    def test_colliding_names(self, png_data_uri):
        cards = [Card("a b", "x", image=png_data_uri), Card("a-b", "y", image=png_data_uri)]
        assert [name for name, _ in archive_entries(cards)] == ["a_b.png", "a_b_2.png"]

    def test_export_archive(self, tmp_path, png_data_uri):
        out = tmp_path / "out" / "images.zip"
        count = export_archive([Card("cat", "feline", image=png_data_uri)], out)

        assert count == 1
        with zipfile.ZipFile(out) as zf:
            assert zf.namelist() == ["cat.png"]

    def test_no_images(self, tmp_path):
        with pytest.raises(EmptyDeckError):
            export_archive([Card("cat", "feline")], tmp_path / "images.zip")
        assert not (tmp_path / "images.zip").exists()


class TestManifest:
    """Test the JSON manifest."""

    def test_records(self, png_data_uri):
        cards = [
            Card("cat", "feline", custom_prompt="tabby", image=png_data_uri),
            Card("dog", "canine"),
            Card("", "no term"),
        ]

        assert build_manifest(cards) == [
            {"term": "cat", "definition": "feline", "imageSrc": png_data_uri},
            {"term": "dog", "definition": "canine", "imageSrc": "N/A"},
        ]

    def test_write_and_load(self, tmp_path, png_data_uri):
        path = tmp_path / "deck.json"
        cards = [Card("cat", "feline", image=png_data_uri), Card("ratio", "a:b relationship")]

        assert export_manifest(cards, path) == 2
        assert json.loads(path.read_text(encoding="utf-8"))[1]["imageSrc"] == "N/A"

        loaded = load_manifest(path)
        assert [(c.term, c.definition, c.image) for c in loaded] == [
            ("cat", "feline", png_data_uri),
            ("ratio", "a:b relationship", None),
        ]

    def test_load_skips_incomplete_records(self, tmp_path):
        path = tmp_path / "deck.json"
        path.write_text(json.dumps([{"term": "a"}, {"term": "b", "definition": "bee"}, "junk"]), encoding="utf-8")
        assert [c.term for c in load_manifest(path)] == ["b"]

    def test_load_rejects_non_list(self, tmp_path):
        path = tmp_path / "deck.json"
        path.write_text('{"term": "a"}', encoding="utf-8")
        with pytest.raises(ValueError):
            load_manifest(path)

    def test_empty(self, tmp_path):
        with pytest.raises(EmptyDeckError):
            export_manifest([], tmp_path / "deck.json")


class TestFaces:
    """Test card face rendering."""

    def test_front_with_image(self, png_data_uri):
        face = render_front(Card("cat", "feline", image=png_data_uri), 0)
        assert face.size == (FACE_WIDTH, FACE_HEIGHT)
        # Pasted art is centred in the picture area
        assert face.getpixel((FACE_WIDTH // 2, 300)) == (255, 0, 0)

    def test_front_colour_band(self):
        face = render_front(Card("cat", "feline"), 1)
        band = Image.new("RGB", (1, 1), card_color(1)).getpixel((0, 0))
        assert face.getpixel((40, FACE_HEIGHT - 30)) == band

    def test_pending_and_failed_markers_differ(self):
        card = Card("cat", "feline")
        failed = render_front(card, 0, failed=True)
        pending = render_front(card, 0, failed=False)
        assert failed.tobytes() != pending.tobytes()

    def test_back_renders_long_definition(self):
        face = render_back(Card("ratio", "a:b relationship " * 40), 2)
        assert face.size == (FACE_WIDTH, FACE_HEIGHT)


class TestPrint:
    """Test the print PDF."""

    def test_front_and_back_pages(self):
        cards = [Card(f"t{i}", f"d{i}", image=to_data_uri(make_png((i * 30, 0, 0)))) for i in range(8)]

        pages = render_pages(cards)

        assert len(pages) == 4
        assert all(p.size == (PAGE_WIDTH_PX, PAGE_HEIGHT_PX) for p in pages)

    def test_export_pdf(self, tmp_path, png_data_uri):
        out = tmp_path / "deck.pdf"
        pages = export_print_pdf([Card("cat", "feline", image=png_data_uri), Card("dog", "canine")], out)

        assert pages == 2
        assert out.read_bytes().startswith(b"%PDF")

    def test_empty_deck(self, tmp_path):
        with pytest.raises(EmptyDeckError):
            export_print_pdf([], tmp_path / "deck.pdf")
