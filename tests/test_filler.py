import pytest

from ronin.ronin.filler import (
    fetch_filler_table,
    filler_list_url,
    generate_slug,
    parse_filler_table,
    series_slug,
)
from ronin.ronin.logging import ScrapeError
from ronin.ronin.models import FillerStatus, SeriesRef

from conftest import filler_page


class TestGenerateSlug:
    @pytest.mark.parametrize("title, expected", [
        ("Naruto", "naruto"),
        ("Naruto: Shippuden", "naruto-shippuden"),
        ("  One   Piece  ", "one-piece"),
        ("Re:Zero - Starting Life in Another World", "rezero---starting-life-in-another-world"),
        ("Fullmetal Alchemist: Brotherhood!", "fullmetal-alchemist-brotherhood"),
        ("Dragon Ball Z Kai (2009)", "dragon-ball-z-kai-2009"),
    ])
    def test_generate_slug(self, title, expected):
        assert generate_slug(title) == expected

    def test_truncated_to_45_and_trimmed(self):
        title = "a" * 44 + " bbbbbbbb"
        slug = generate_slug(title)
        assert len(slug) <= 45
        assert slug == "a" * 44

    def test_non_ascii_is_dropped(self):
        assert generate_slug("進撃の巨人 Attack on Titan") == "attack-on-titan"

    def test_tvdb_slug_preferred(self):
        series = SeriesRef(id="1", name="Naruto Shippuuden", provider_ids={"TvdbSlug": "naruto-shippuden"})
        assert series_slug(series) == "naruto-shippuden"
        assert filler_list_url("naruto-shippuden") == "https://www.animefillerlist.com/shows/naruto-shippuden"

    def test_name_used_without_tvdb_slug(self):
        assert series_slug(SeriesRef(id="1", name="Bleach")) == "bleach"


class TestParseFillerTable:
    def test_duplicate_numbers_last_write_wins(self):
        html = filler_page([(1, "Filler"), (2, "Manga Canon"), (1, "Anime Canon")])
        assert parse_filler_table(html) == {
            1: FillerStatus.ANIME_CANON,
            2: FillerStatus.MANGA_CANON,
        }

    def test_all_labels(self):
        html = filler_page([
            (1, "Manga Canon"),
            (2, "Mixed Canon/Filler"),
            (3, "Filler"),
            (4, "Anime Canon"),
        ])
        table = parse_filler_table(html)
        assert [table[n].value for n in (1, 2, 3, 4)] == [
            "Manga Canon", "Mixed Canon/Filler", "Filler", "Anime Canon",
        ]

    def test_non_numeric_rows_skipped(self):
        html = filler_page([("26-27", "Filler"), ("", "Filler"), (5, "Filler")])
        assert parse_filler_table(html) == {5: FillerStatus.FILLER}

    def test_unknown_labels_skipped(self):
        html = filler_page([(1, "Recap"), (2, "Filler")])
        assert parse_filler_table(html) == {2: FillerStatus.FILLER}

    @pytest.mark.parametrize("html", [
        "",
        "<html><body><p>Page not found</p></body></html>",
        '<table class="SomethingElse"><tbody><tr><td class="Number">1</td>'
        '<td class="Type"><span>Filler</span></td></tr></tbody></table>',
        '<table class="EpisodeList"><tbody><tr><td class="Number">1</td></tr></tbody></table>',
    ])
    def test_missing_or_malformed_table_is_empty(self, html):
        assert parse_filler_table(html) == {}


class TestFetchFillerTable:
    def test_fetch(self, client, session, waits):
        series = SeriesRef(id="1", name="Naruto")
        session.pages["https://www.animefillerlist.com/shows/naruto"] = filler_page([(3, "Filler")])

        assert fetch_filler_table(client, series) == {3: FillerStatus.FILLER}
        assert waits == [2.0]

    def test_missing_page_raises(self, client, waits):
        with pytest.raises(ScrapeError):
            fetch_filler_table(client, SeriesRef(id="1", name="Unknown Show"))
        assert waits == [2.0]
