# src/e2e/test_dom.py

from tinysearch.dom import Page, Event


def test_events_bubble_to_the_page():
    page = Page()
    outer = page.body.append_child(page.create_element("div"))
    inner = outer.append_child(page.create_element("span"))
    order = []
    inner.add_event_listener("click", lambda e: order.append("inner"))
    outer.add_event_listener("click", lambda e: order.append("outer"))
    page.add_event_listener("click", lambda e: order.append(("page", e.target)))

    inner.click()
    assert order == ["inner", "outer", ("page", inner)]


def test_focus_does_not_bubble():
    page = Page()
    el = page.body.append_child(page.create_element("input"))
    seen = []
    page.add_event_listener("focus", seen.append)
    el.focus()
    assert seen == []


def test_detached_elements_do_not_reach_the_page():
    page = Page()
    el = page.create_element("div")
    seen = []
    page.add_event_listener("click", seen.append)
    el.click()
    assert seen == []


def test_classes_and_attributes():
    page = Page()
    el = page.create_element("div")
    el.add_class("a"); el.add_class("b"); el.add_class("a")
    assert el.class_name == "a b"
    el.remove_class("a")
    assert el.class_name == "b" and not el.has_class("a")
    el.set_attribute("aria-selected", "false")
    el.remove_attribute("aria-selected")
    assert not el.has_attribute("aria-selected")


def test_text_content_is_escaped_when_serialised():
    page = Page()
    el = page.create_element("div")
    el.text_content = "<b>x</b> & y"
    assert el.to_html() == "<div>&lt;b&gt;x&lt;/b&gt; &amp; y</div>"
    assert el.text_content == "<b>x</b> & y"


def test_to_html_renders_tree_and_input_value():
    page = Page()
    wrap = page.body.append_child(page.create_element("div"))
    inp = wrap.append_child(page.create_element("input"))
    inp.id = "tinysearch"
    inp.value = 'a "quoted" value'
    assert wrap.to_html() == '<div><input id="tinysearch" value="a &quot;quoted&quot; value"></div>'


def test_get_element_by_id_and_query_param():
    page = Page("/search?q=hello%20world&x=1")
    el = page.body.append_child(page.create_element("p"))
    el.id = "target"
    assert page.get_element_by_id("target") is el
    assert page.get_element_by_id("missing") is None
    assert page.query_param("q") == "hello world"
    assert page.query_param("nope") is None


def test_prevent_default_marks_event():
    ev = Event("keydown", key="ArrowDown")
    ev.prevent_default()
    assert ev.default_prevented
