from sergey.slots import extract_slots


def test_plain_content_is_default_slot():
    assert extract_slots("  Hello \n") == {"default": "Hello"}


def test_named_templates_are_removed_from_default():
    slots = extract_slots(
        '<sergey-template name="title"> Hi </sergey-template>\n<p>Body</p>\n'
        '<sergey-template name="foot"><i>f</i></sergey-template>'
    )
    assert slots == {"default": "<p>Body</p>", "title": "Hi", "foot": "<i>f</i>"}


def test_default_template_fills_default_slot():
    slots = extract_slots('<sergey-template name="default"> D </sergey-template>')
    assert slots["default"] == "D"


def test_unnamed_template_registers_empty_key():
    slots = extract_slots("<sergey-template>orphan</sergey-template>rest")
    assert slots[""] == "orphan"
    assert slots["default"] == "rest"


def test_empty_content():
    assert extract_slots("") == {"default": ""}
