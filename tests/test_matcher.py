from glyph.matcher import BLOCK, FOR, IF, RANGE, find_block_end


def _match(text, spec):
    opener = spec.opener.search(text)
    return find_block_end(text, spec, opener.end())


def test_outer_else_is_not_confused_with_inner_else():
    text = "{{ if a }}{{ if b }}X{{ else }}Y{{ endif }}Z{{ else }}W{{ endif }}"
    match = _match(text, IF)
    assert match.first_body(text) == "{{ if b }}X{{ else }}Y{{ endif }}Z"
    assert match.second_body(text) == "W"
    assert match.closer[1] == len(text)


def test_block_without_divider():
    text = "{{ if a }}yes{{ endif }} tail"
    match = _match(text, IF)
    assert match.divider is None
    assert match.first_body(text) == "yes"
    assert match.second_body(text) == ""


def test_only_first_top_level_divider_counts():
    text = "{{ if a }}1{{ else }}2{{ else }}3{{ endif }}"
    match = _match(text, IF)
    assert match.first_body(text) == "1"
    assert match.second_body(text) == "2{{ else }}3"


def test_unclosed_block_returns_none():
    text = "{{ for x in items }}{{ for y in x }}{{ endfor }}"
    assert _match(text, FOR) is None


def test_nested_loops_and_ranges():
    text = "{{ for a in b }}{{ for c in d }}{{ c }}{{ endfor }}!{{ endfor }}"
    assert _match(text, FOR).first_body(text) == "{{ for c in d }}{{ c }}{{ endfor }}!"

    text = "{{ range a }}{{ range b }}x{{ end }}y{{ end }}z"
    assert _match(text, RANGE).first_body(text) == "{{ range b }}x{{ end }}y"


def test_nested_named_blocks():
    text = '{{ block "outer" }}A{{ block "inner" }}B{{ endblock }}C{{ endblock }}'
    match = _match(text, BLOCK)
    assert match.first_body(text) == 'A{{ block "inner" }}B{{ endblock }}C'


def test_other_block_kinds_are_ignored():
    text = "{{ if a }}{{ for x in y }}{{ endfor }}{{ endif }}"
    match = _match(text, IF)
    assert match.first_body(text) == "{{ for x in y }}{{ endfor }}"
