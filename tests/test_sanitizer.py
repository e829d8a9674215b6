"""Tests for now-playing metadata cleanup."""

import pytest

from livelyrics.core.sanitizer import (
    is_artist_suspicious,
    split_artist_from_title,
    strip_all_brackets,
    strip_junk_tags,
)


class TestIsArtistSuspicious:
    @pytest.mark.parametrize(
        "artist",
        ["", "   ", "<unknown>", "Unknown Artist", "UNKNOWN", "Various Artists", "n/a"],
    )
    def test_placeholders(self, artist):
        assert is_artist_suspicious(artist)

    def test_none_is_suspicious(self):
        assert is_artist_suspicious(None)

    @pytest.mark.parametrize("artist", ["Glass Animals", "The Weeknd", "Unk"])
    def test_real_artists(self, artist):
        assert not is_artist_suspicious(artist)


class TestSplitArtistFromTitle:
    def test_hyphen(self):
        assert split_artist_from_title("Glass Animals - Heat Waves") == (
            "Heat Waves",
            "Glass Animals",
        )

    def test_en_dash(self):
        assert split_artist_from_title("Glass Animals – Heat Waves") == (
            "Heat Waves",
            "Glass Animals",
        )

    def test_further_dashes_stay_in_title(self):
        title, artist = split_artist_from_title("Daft Punk - One More Time - Radio Edit")
        assert artist == "Daft Punk"
        assert title == "One More Time - Radio Edit"

    def test_no_separator(self):
        assert split_artist_from_title("Heat Waves") == ("Heat Waves", None)

    def test_hyphenated_word_is_not_a_separator(self):
        assert split_artist_from_title("Jay-Z Song") == ("Jay-Z Song", None)

    def test_empty_side_is_not_a_split(self):
        assert split_artist_from_title("Heat Waves - ") == ("Heat Waves - ", None)

    def test_non_string_input_returned(self):
        assert split_artist_from_title(None) == (None, None)


class TestStripJunkTags:
    def test_official_video(self):
        assert strip_junk_tags("Song (Official Music Video)") == "Song"

    def test_square_brackets(self):
        assert strip_junk_tags("Song [4K Remastered]") == "Song"

    def test_case_insensitive(self):
        assert strip_junk_tags("Song (LIVE at Wembley)") == "Song"

    def test_feat_clause(self):
        assert strip_junk_tags("Song feat. Other") == "Song"
        assert strip_junk_tags("Song ft. Other") == "Song"
        assert strip_junk_tags("Song featuring Other Person") == "Song"

    def test_bracketed_feat(self):
        assert strip_junk_tags("Song (feat. Other)") == "Song"

    def test_keeps_meaningful_brackets(self):
        assert strip_junk_tags("(Don't Fear) The Reaper") == "(Don't Fear) The Reaper"

    def test_keyword_prefix_is_junk(self):
        assert strip_junk_tags("Song (Videoclip Oficial)") == "Song"
        assert strip_junk_tags("Song (Mixed by DJ Someone)") == "Song"

    def test_keyword_must_open_the_bracket(self):
        assert strip_junk_tags("Song (Not Official)") == "Song (Not Official)"

    def test_multiple_tags(self):
        assert strip_junk_tags("Song (Official Video) [HD]") == "Song"

    def test_unchanged_text(self):
        assert strip_junk_tags("Heat Waves") == "Heat Waves"

    def test_empty(self):
        assert strip_junk_tags("") == ""


class TestStripAllBrackets:
    def test_removes_everything_bracketed(self):
        assert strip_all_brackets("(Don't Fear) The Reaper [2019]") == "The Reaper"

    def test_no_brackets(self):
        assert strip_all_brackets("Heat Waves") == "Heat Waves"

    def test_only_brackets(self):
        assert strip_all_brackets("(Intro)") == ""
