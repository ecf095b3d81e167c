from __future__ import annotations

from scripts.lib.usage_locator import (
    by_embed_marker,
    by_featured_reference,
    by_url_path,
    locate,
)


def test_not_found(store, site):
    site.image(100, file="2024/06/a.jpg")
    site.post(1, title="Unrelated", content="<p>nothing here</p>")
    assert locate(store, 100) is None


def test_featured_beats_embed_even_with_higher_id(store, site):
    site.image(100, file="2024/06/a.jpg")
    site.post(3, title="Embeds it", content='<img class="wp-image-100" />')
    site.post(5, title="Features it", featured=100)
    assert locate(store, 100) == 5


def test_embed_beats_url_path(store, site):
    site.image(100, file="2024/06/a.jpg")
    site.post(2, content='<img src="https://example.test/wp-content/uploads/2024/06/a.jpg" />')
    site.post(7, content='<img class="wp-image-100" />')
    assert locate(store, 100) == 7


def test_url_path_match(store, site):
    site.image(100, file="2024/06/a.jpg")
    # Relative src still contains the URL path
    site.post(4, content='<img src="/wp-content/uploads/2024/06/a.jpg" />')
    assert by_url_path(store, 100) == 4
    assert locate(store, 100) == 4


def test_url_path_needs_attached_file(store, site):
    site.image(100)
    site.post(4, content="/wp-content/uploads/")
    assert by_url_path(store, 100) is None


def test_lowest_id_wins_within_strategy(store, site):
    site.image(100, file="2024/06/a.jpg")
    site.post(9, featured=100)
    site.post(6, featured=100)
    site.post(8, content="wp-image-100")
    site.post(4, content="wp-image-100")
    assert by_featured_reference(store, 100) == 6
    assert by_embed_marker(store, 100) == 4


def test_excluded_types_and_statuses_are_ignored(store, site):
    site.image(100, file="2024/06/a.jpg")
    site.post(1, content="wp-image-100", post_type="revision", status="inherit")
    site.post(2, content="wp-image-100", post_type="nav_menu_item")
    site.post(3, content="wp-image-100", status="trash")
    site.post(4, content="wp-image-100", status="auto-draft")
    site.post(5, featured=100, post_type="attachment", status="inherit")
    assert locate(store, 100) is None
    site.post(6, content="wp-image-100", status="future", post_type="page")
    assert locate(store, 100) == 6


def test_all_usable_statuses_match(store, site):
    for i, status in enumerate(("publish", "private", "draft", "pending", "future"), start=1):
        site.image(100 + i, file=f"x{i}.jpg")
        site.post(i, featured=100 + i, status=status)
        assert locate(store, 100 + i) == i


def test_embed_marker_is_a_plain_substring(store, site):
    # Known looseness: wp-image-4 also matches wp-image-42
    site.image(4, file="a.jpg")
    site.post(10, content='<img class="wp-image-42" />')
    assert locate(store, 4) == 10


def test_like_wildcards_in_path_are_literal(store, site):
    site.image(100, file="2024/06/a_b%.jpg")
    site.post(1, content="/wp-content/uploads/2024/06/aXbZZ.jpg")
    assert by_url_path(store, 100) is None
    site.post(2, content="/wp-content/uploads/2024/06/a_b%.jpg")
    assert by_url_path(store, 100) == 2


def test_custom_strategy_chain(store, site):
    site.image(100, file="a.jpg")
    site.post(3, content="wp-image-100")
    site.post(5, featured=100)
    assert locate(store, 100, strategies=(by_embed_marker, by_featured_reference)) == 3


def test_featured_reference_compares_numerically(store, site):
    site.image(100, file="a.jpg")
    site.image(200, file="b.jpg")
    site.post(3)
    site.meta(3, "_thumbnail_id", "0100")
    site.post(4)
    site.meta(4, "_thumbnail_id", "200 ")
    site.post(5)
    site.meta(5, "_thumbnail_id", "1000")
    assert by_featured_reference(store, 100) == 3
    assert by_featured_reference(store, 200) == 4
    assert by_featured_reference(store, 10) is None
