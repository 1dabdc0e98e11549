"""Test the container and sequence protocols."""
import logging

import pytest

from magicmethods.containers import CaseInsensitiveDict
from magicmethods.containers import CountingDict
from magicmethods.containers import IndexedOnly
from magicmethods.containers import Playlist
from magicmethods.containers import demo
from magicmethods.containers import iteration_protocol
from magicmethods.containers import membership_protocol

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))


@pytest.fixture
def playlist():
    return Playlist(["intro", "verse", "chorus", "verse", "outro"])


def test_playlist_sequence(playlist):
    assert len(playlist) == 5
    assert playlist[0] == "intro"
    assert playlist[-1] == "outro"
    assert "chorus" in playlist
    assert "bridge" not in playlist
    assert list(playlist) == ["intro", "verse", "chorus", "verse", "outro"]
    with pytest.raises(IndexError):
        playlist[5]


def test_playlist_slicing(playlist):
    part = playlist[1:3]
    assert isinstance(part, Playlist)
    assert part == Playlist(["verse", "chorus"])
    assert playlist[::-1] == Playlist(reversed(playlist))


def test_playlist_mixins(playlist):
    assert playlist.index("verse") == 1
    assert playlist.index("verse", 2) == 3
    assert playlist.count("verse") == 2
    with pytest.raises(ValueError):
        playlist.index("bridge")
    assert list(reversed(playlist)) == ["outro", "verse", "chorus", "verse", "intro"]


def test_playlist_concatenation(playlist):
    combined = playlist[:1] + Playlist(["coda"])
    assert combined == Playlist(["intro", "coda"])
    with pytest.raises(TypeError):
        playlist + ["coda"]
    assert playlist != ["intro", "verse", "chorus", "verse", "outro"]
    assert repr(Playlist(["a"])) == "Playlist(['a'])"


def test_playlist_copies_input():
    tracks = ["a", "b"]
    playlist = Playlist(tracks)
    tracks.append("c")
    assert len(playlist) == 2


def test_getitem_iteration_fallback():
    legacy = IndexedOnly([10, 20, 30])
    assert list(legacy) == [10, 20, 30]
    # Three items and the IndexError that ends the iteration.
    assert legacy.lookups == 4
    assert iter(legacy) is not None


def test_getitem_membership_fallback():
    legacy = IndexedOnly("abcdef")
    assert "b" in legacy
    # Stops at the first match.
    assert legacy.lookups == 2
    assert "z" not in legacy


def test_protocol_names(playlist):
    class OnlyContains:
        def __contains__(self, item):
            return True

    class Blocked:
        __iter__ = None
        __contains__ = None

        def __getitem__(self, index):
            return index

    assert iteration_protocol(playlist) == "__iter__"
    assert membership_protocol(playlist) == "__contains__"
    assert iteration_protocol(IndexedOnly([])) == "__getitem__"
    assert membership_protocol(IndexedOnly([])) == "__getitem__"
    assert iteration_protocol(OnlyContains()) is None
    assert membership_protocol(OnlyContains()) == "__contains__"
    assert iteration_protocol(Blocked()) is None
    assert membership_protocol(Blocked()) is None
    assert iteration_protocol(42) is None
    assert membership_protocol(42) is None
    assert membership_protocol({}) == "__contains__"
    assert iteration_protocol(iter([])) == "__iter__"


def test_none_blocks_fallback():
    class NotIterable:
        __iter__ = None

        def __getitem__(self, index):
            return index

    with pytest.raises(TypeError):
        iter(NotIterable())
    with pytest.raises(TypeError):
        1 in NotIterable()
    assert iteration_protocol(NotIterable()) is None


def test_counting_dict():
    counts = CountingDict.tally("hello")
    assert isinstance(counts, CountingDict)
    assert counts == {"h": 1, "e": 1, "l": 2, "o": 1}
    assert counts["z"] == 0
    assert "z" not in counts
    assert counts.get("z") is None
    assert counts.get("z", 0) == 0
    counts["z"] += 1
    assert counts["z"] == 1


def test_case_insensitive_dict():
    headers = CaseInsensitiveDict({"Content-Type": "text/plain"}, Accept="*/*")
    assert headers["content-type"] == "text/plain"
    assert headers["ACCEPT"] == "*/*"
    assert "CONTENT-TYPE" in headers
    assert len(headers) == 2

    headers["CONTENT-TYPE"] = "application/json"
    assert len(headers) == 2
    assert list(headers) == ["CONTENT-TYPE", "Accept"]
    assert headers.get("content-type") == "application/json"

    del headers["accept"]
    assert "Accept" not in headers
    with pytest.raises(KeyError):
        headers["accept"]
    with pytest.raises(KeyError):
        del headers["accept"]


def test_case_insensitive_dict_key_type():
    headers = CaseInsensitiveDict()
    with pytest.raises(TypeError):
        headers[1] = "one"
    headers["one"] = 1
    # Non-str keys are never present, so lookups miss instead of failing.
    with pytest.raises(KeyError):
        headers[1]
    with pytest.raises(KeyError):
        del headers[1]
    assert 5 not in headers
    assert headers.get(5) is None
    assert headers.get(5, "default") == "default"
    assert headers.pop(5, None) is None


def test_case_insensitive_dict_equality():
    headers = CaseInsensitiveDict(A=1, b=2)
    assert headers == {"a": 1, "B": 2}
    assert headers == CaseInsensitiveDict(a=1, B=2)
    assert headers != {"a": 1}
    assert headers != {1: 1, 2: 2}
    # Keys of the other mapping that differ only by case do not merge.
    assert CaseInsensitiveDict(a=1) != {"A": 1, "a": 1}
    assert CaseInsensitiveDict(a=1, b=2) != {"A": 1, "a": 1}
    assert headers != [("a", 1), ("b", 2)]


def test_case_insensitive_dict_copy():
    headers = CaseInsensitiveDict(Host="example.org")
    duplicate = headers.copy()
    duplicate["HOST"] = "example.com"
    assert headers["host"] == "example.org"
    assert list(duplicate) == ["HOST"]
    assert repr(headers) == "CaseInsensitiveDict({'Host': 'example.org'})"


def test_demo():
    observations = dict(demo())
    assert observations["len"] == 5
    assert observations["slice"] == Playlist(["verse", "chorus"])
    assert observations["index mixin"] == 2
    assert observations["count mixin"] == 2
    assert observations["concatenated"] == Playlist(["intro", "outro"])
    assert observations["iter via __getitem__"] == ["a", "b", "c"]
    assert observations["lookups including the final IndexError"] == 4
    assert observations["in via __getitem__"] is True
    assert observations["protocols of Playlist"] == ("__iter__", "__contains__")
    assert observations["protocols of IndexedOnly"] == ("__getitem__", "__getitem__")
    assert observations["protocols of _NotIterable"] == (None, None)
    assert observations["protocols of int"] == (None, None)
    assert observations["tally"] == {"m": 1, "i": 4, "s": 4, "p": 2}
    assert observations["absent key"] == 0
    assert observations["absent key not stored"] is False
    assert observations[".get skips __missing__"] is None
    assert observations["case-insensitive read"] == "application/json"
    assert observations["keys keep last case"] == ["CONTENT-TYPE", "content-length"]
    assert observations["equality ignores case"] is True
