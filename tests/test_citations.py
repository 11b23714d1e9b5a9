from pitch_panda.citations import add_source, generate_references_section, merge_sources


def test_add_source_deduplicates_by_url():
    sources, first = add_source([], "https://a.com", "A", "content")
    sources, second = add_source(sources, "https://b.com", "B")
    sources, again = add_source(sources, "https://a.com", "A again")

    assert (first, second, again) == (1, 2, 1)
    assert len(sources) == 2
    assert sources[0]["content_snippet"] == "content"


def test_merge_sources_renumbers_in_first_seen_order():
    left, _ = add_source([], "https://a.com", "A")
    right, _ = add_source([], "https://b.com", "B")
    right, _ = add_source(right, "https://a.com", "A duplicate")

    merged = merge_sources(left, right)

    assert [s["url"] for s in merged] == ["https://a.com", "https://b.com"]
    assert [s["number"] for s in merged] == [1, 2]
    assert merged[0]["title"] == "A"


def test_generate_references_section():
    assert generate_references_section([]) == "No sources cited."
    sources, _ = add_source([], "https://a.com", "A")
    section = generate_references_section(sources)
    assert section.startswith("## References")
    assert "[1] A. Retrieved " in section
    assert "https://a.com" in section
