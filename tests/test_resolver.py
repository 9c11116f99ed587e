import asyncio

from ytdlrc.core.resolver import MetadataResolver, normalize_directory_key

URL = "https://www.youtube.com/@SomeChannel/videos"
DEFAULT = "unknown-playlist"


def _normalize(value, field="playlist_title", lowercase=False):
    return normalize_directory_key(
        value, field=field, default=DEFAULT, lowercase=lowercase
    )


def test_uploads_prefix_is_trimmed():
    assert _normalize("Uploads_from_SomeChannel") == "SomeChannel"


def test_prefix_only_trimmed_at_start():
    assert _normalize("Best_of_Uploads_from_X") == "Best_of_Uploads_from_X"


def test_prefix_kept_for_other_fields():
    assert _normalize("Uploads_from_SomeChannel", field="uploader") == (
        "Uploads_from_SomeChannel"
    )


def test_lowercase_folding():
    assert _normalize("SomeChannel", lowercase=True) == "somechannel"
    assert _normalize("Uploads_from_SomeChannel", lowercase=True) == "somechannel"


def test_default_value_is_never_transformed():
    assert normalize_directory_key(
        "Uploads_from_Default", field="playlist_title",
        default="Uploads_from_Default", lowercase=True,
    ) == "Uploads_from_Default"


def test_resolve_returns_default_on_empty_output(make_config, fake_ytdl_cls):
    resolver = MetadataResolver(make_config(), fake_ytdl_cls())
    assert asyncio.run(resolver.resolve("playlist_title", 1, URL)) == DEFAULT


def test_first_item_wins(make_config, fake_ytdl_cls):
    ytdl = fake_ytdl_cls(fields={(URL, 1): "Uploads_from_SomeChannel"})
    resolver = MetadataResolver(make_config(), ytdl)

    key = asyncio.run(resolver.resolve_directory_key(URL))

    assert key == "SomeChannel"
    assert ytdl.field_calls == [("playlist_title", 1, URL)]


def test_falls_back_to_second_item(make_config, fake_ytdl_cls):
    ytdl = fake_ytdl_cls(fields={(URL, 2): "Some_Playlist"})
    resolver = MetadataResolver(make_config(lowercase_directories=True), ytdl)

    key = asyncio.run(resolver.resolve_directory_key(URL))

    assert key == "some_playlist"
    assert [call[1] for call in ytdl.field_calls] == [1, 2]
    assert resolver.last_attempts == 2


def test_both_attempts_fail_with_skip_enabled(make_config, fake_ytdl_cls):
    resolver = MetadataResolver(make_config(skip_on_fail=True), fake_ytdl_cls())
    assert asyncio.run(resolver.resolve_directory_key(URL)) is None


def test_both_attempts_fail_with_skip_disabled(make_config, fake_ytdl_cls):
    config = make_config(skip_on_fail=False, lowercase_directories=True,
                         default_video_value="Unknown-Playlist")
    resolver = MetadataResolver(config, fake_ytdl_cls())
    assert asyncio.run(resolver.resolve_directory_key(URL)) == "Unknown-Playlist"


def test_custom_field_is_requested(make_config, fake_ytdl_cls):
    ytdl = fake_ytdl_cls(fields={(URL, 1): "SomeUploader"})
    resolver = MetadataResolver(make_config(video_value="uploader"), ytdl)

    assert asyncio.run(resolver.resolve_directory_key(URL)) == "SomeUploader"
    assert ytdl.field_calls[0][0] == "uploader"


def test_prefix_only_title_is_skipped(make_config, fake_ytdl_cls):
    ytdl = fake_ytdl_cls(fields={(URL, 1): "Uploads_from_"})
    resolver = MetadataResolver(make_config(skip_on_fail=True), ytdl)

    assert asyncio.run(resolver.resolve_directory_key(URL)) is None


def test_prefix_only_title_uses_default_without_skip(make_config, fake_ytdl_cls):
    ytdl = fake_ytdl_cls(fields={(URL, 1): "Uploads_from_"})
    resolver = MetadataResolver(make_config(skip_on_fail=False), ytdl)

    assert asyncio.run(resolver.resolve_directory_key(URL)) == DEFAULT
