"""Tests for list, detail, and form pages."""

from __future__ import annotations

import unittest

from scriptdeck.extensions.types import Detail as DetailContent
from scriptdeck.extensions.types import ScriptAction, ScriptInput
from scriptdeck.pages.detail import Detail
from scriptdeck.pages.form import Form, new_form_item
from scriptdeck.pages.items import ListItem
from scriptdeck.pages.list import List
from scriptdeck.runtime.actions import Action
from scriptdeck.runtime.messages import CopyTextMsg, KeyMsg, PopMsg, QueryChangedMsg, SubmitMsg


def press(page, *keys):
    cmd = None
    for key in keys:
        page, cmd = page.update(KeyMsg(key))
    return page, cmd


def items(*titles: str) -> list[ListItem]:
    return [
        ListItem(id=str(index), title=title, actions=[Action(title="Pick", cmd=lambda t=title: t, shortcut="enter")])
        for index, title in enumerate(titles)
    ]


class ListPageTests(unittest.TestCase):
    def _page(self) -> List:
        page = List("Things")
        page.set_size(60, 12)
        page.set_items(items("alpha", "beta", "gamma"))
        return page

    def test_typing_filters_locally(self) -> None:
        page, cmd = press(self._page(), "g", "a")
        self.assertIsNone(cmd)
        self.assertEqual(page.selection().title, "gamma")

    def test_enter_runs_first_action_of_selection(self) -> None:
        page, cmd = press(self._page(), "down", "enter")
        self.assertEqual(cmd(), "beta")

    def test_dynamic_list_emits_query_changes_and_skips_filtering(self) -> None:
        page = self._page()
        page.dynamic = True
        page, cmd = press(page, "z")
        self.assertEqual(cmd(), QueryChangedMsg("z"))
        self.assertEqual(len(page.filter.filtered), 3)

    def test_esc_clears_query_then_pops(self) -> None:
        page, _ = press(self._page(), "b")
        page, cmd = press(page, "esc")
        self.assertIsNone(cmd)
        self.assertEqual(page.query(), "")
        page, cmd = press(page, "esc")
        self.assertEqual(cmd(), PopMsg())

    def test_set_items_keeps_selection_by_id(self) -> None:
        page, _ = press(self._page(), "down", "down")
        page.set_items(items("alpha", "beta", "gamma", "delta"))
        self.assertEqual(page.selection().id, "2")

    def test_loading_keeps_items_visible(self) -> None:
        page = self._page()
        page.set_is_loading(True)
        view = page.view()
        self.assertIn("alpha", view)
        self.assertEqual(len(view.split("\n")), 12)

    def test_preview_pane_shows_selected_preview(self) -> None:
        page = List("Things")
        page.show_preview = True
        page.set_size(80, 10)
        page.set_items([ListItem(id="0", title="one", preview="preview text")])
        self.assertIn("preview text", page.view())


class DetailPageTests(unittest.TestCase):
    def test_scroll_is_clamped(self) -> None:
        page = Detail("Doc", "\n".join(f"line {n}" for n in range(30)))
        page.set_size(40, 10)
        page, _ = press(page, "end")
        self.assertEqual(page.offset, 30 - 8)
        page, _ = press(page, "down")
        self.assertEqual(page.offset, 22)
        page, _ = press(page, "home", "up")
        self.assertEqual(page.offset, 0)

    def test_first_action_answers_enter(self) -> None:
        page = Detail("Doc")
        page.set_size(40, 10)
        page.set_detail(DetailContent(content="hi", actions=(ScriptAction(type="copy-text", text="hi"),)))
        page, cmd = press(page, "enter")
        self.assertEqual(cmd(), CopyTextMsg("hi"))

    def test_esc_pops(self) -> None:
        _, cmd = press(Detail("Doc", "x"), "esc")
        self.assertEqual(cmd(), PopMsg())


class FormPageTests(unittest.TestCase):
    def _form(self) -> Form:
        form = Form(
            "params",
            "Params",
            [
                new_form_item(ScriptInput(name="name")),
                new_form_item(ScriptInput(name="note", type="textarea", optional=True)),
                new_form_item(ScriptInput(name="force", type="checkbox", default=False)),
                new_form_item(ScriptInput(name="color", type="dropdown", data=("red", "blue"), default="blue")),
            ],
        )
        form.set_size(40, 20)
        return form

    def test_required_field_blocks_submit(self) -> None:
        form, cmd = press(self._form(), "ctrl+s")
        self.assertIsNone(cmd)
        self.assertEqual(form.items[0].error, "required")

    def test_submit_collects_typed_values(self) -> None:
        form, _ = press(self._form(), "b", "o", "b", "tab", "h", "i", "enter", "x", "tab", " ", "tab", "right")
        form, cmd = press(form, "ctrl+s")
        self.assertEqual(
            cmd(),
            SubmitMsg("params", {"name": "bob", "note": "hi\nx", "force": True, "color": "red"}),
        )

    def test_enter_on_last_field_submits(self) -> None:
        form, _ = press(self._form(), "a", "enter", "tab", "enter")
        self.assertEqual(form.focus_index, 3)
        form, cmd = press(form, "enter")
        self.assertEqual(cmd().values["name"], "a")

    def test_defaults_are_prefilled(self) -> None:
        item = new_form_item(ScriptInput(name="who", default="me"))
        self.assertEqual(item.value(), "me")
        masked = new_form_item(ScriptInput(name="token", type="password"), "secret")
        masked.focus()
        self.assertNotIn("secret", masked.view()[1])

    def test_esc_pops(self) -> None:
        _, cmd = press(self._form(), "esc")
        self.assertEqual(cmd(), PopMsg())
