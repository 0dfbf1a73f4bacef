"""Stackable pages: list, detail, form, and the loading placeholder."""

from .action_list import ActionList
from .base import Page
from .detail import Detail
from .filter import Filter
from .form import Form, FormItem, new_form_item
from .items import ListItem, list_item_from_script
from .list import List
from .pending import Pending

__all__ = [
    "ActionList",
    "Detail",
    "Filter",
    "Form",
    "FormItem",
    "List",
    "ListItem",
    "Page",
    "Pending",
    "list_item_from_script",
    "new_form_item",
]
