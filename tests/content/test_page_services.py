"""
Tests for PageService and the page tree helpers.
"""

from dataclasses import dataclass

from django.test import SimpleTestCase, TestCase

from apps.content import page_tree
from apps.content.models import STATUS_DRAFT, Page
from apps.content.services import PageCreationRequest, PageService
from tests.factories.content import create_page


@dataclass
class Node:
    id: int
    parent_id: int | None
    sort_order: int = 0
    title: str = ""


class PageTreeTestCase(SimpleTestCase):
    def setUp(self):
        self.pages = [
            Node(1, None, 1, "Б"),
            Node(2, None, 0, "А"),
            Node(3, 1, 0, "Child"),
            Node(4, 3, 0, "Grandchild"),
            Node(5, 99, 5, "Orphan"),
        ]

    def test_build_hierarchy_nests_and_sorts(self):
        tree = page_tree.build_hierarchy(self.pages)

        self.assertEqual([node["id"] for node in tree], [2, 1])
        self.assertEqual(tree[1]["children"][0]["id"], 3)
        self.assertEqual(tree[1]["children"][0]["children"][0]["id"], 4)

    def test_orphans_are_dropped_from_tree(self):
        ids = {node["id"] for node in page_tree.build_hierarchy(self.pages)}
        self.assertNotIn(5, ids)

    def test_flatten_reports_depth(self):
        flat = [(page.id, depth) for page, depth in page_tree.flatten_pages(self.pages)]
        self.assertEqual(flat, [(2, 0), (1, 0), (3, 1), (4, 2), (5, 0)])

    def test_descendants(self):
        self.assertEqual(page_tree.get_descendant_ids(1, self.pages), {3, 4})
        self.assertTrue(page_tree.is_descendant_of(4, 1, self.pages))
        self.assertFalse(page_tree.is_descendant_of(2, 1, self.pages))

    def test_depth_stops_on_cycles(self):
        cyclic = [Node(1, 2), Node(2, 1)]
        self.assertEqual(page_tree.get_page_depth(cyclic[0], cyclic), 1)
        self.assertEqual(page_tree.get_page_depth(self.pages[3], self.pages), 2)


class PageServiceTestCase(TestCase):
    def test_create_with_default_template(self):
        page = PageService.create(PageCreationRequest(title="О нама")).unwrap()

        self.assertEqual(page.slug, "o-nama")
        self.assertEqual(page.template, "default")
        self.assertEqual(page.status, STATUS_DRAFT)

    def test_create_rejects_unknown_template_and_parent(self):
        self.assertEqual(
            PageService.create(PageCreationRequest(title="X", template="nope")).unwrap_err().field, "template"
        )
        self.assertEqual(
            PageService.create(PageCreationRequest(title="X", parent_id=999)).unwrap_err().field, "parentId"
        )

    def test_only_one_homepage(self):
        first = PageService.create(PageCreationRequest(title="Први", is_homepage=True)).unwrap()
        PageService.create(PageCreationRequest(title="Други", is_homepage=True))

        first.refresh_from_db()
        self.assertFalse(first.is_homepage)
        self.assertEqual(Page.objects.filter(is_homepage=True).count(), 1)

    def test_update_blank_template_falls_back_to_default(self):
        page = create_page(title="Контакт", template="contact")

        updated = PageService.update(page, template="").unwrap()

        updated.refresh_from_db()
        self.assertEqual(updated.template, "default")
        self.assertEqual(PageService.update(page, template="nope").unwrap_err().field, "template")

    def test_update_rejects_cycles(self):
        parent = create_page(title="Parent")
        child = create_page(title="Child", parent=parent)

        self.assertEqual(PageService.update(parent, parent_id=parent.pk).unwrap_err().field, "parentId")
        self.assertEqual(PageService.update(parent, parent_id=child.pk).unwrap_err().field, "parentId")

    def test_update_moves_page(self):
        target = create_page(title="Target")
        page = create_page(title="Mover")

        moved = PageService.update(page, parent_id=target.pk).unwrap()

        self.assertEqual(moved.parent_id, target.pk)

    def test_delete_reparents_children(self):
        root = create_page(title="Root")
        middle = create_page(title="Middle", parent=root)
        leaf = create_page(title="Leaf", parent=middle)

        PageService.delete(middle)

        leaf.refresh_from_db()
        self.assertEqual(leaf.parent_id, root.pk)

    def test_hierarchical_published_only(self):
        create_page(title="Public")
        create_page(title="Hidden", status=STATUS_DRAFT)

        titles = [node["title"] for node in PageService.hierarchical(published_only=True)]

        self.assertEqual(titles, ["Public"])

    def test_available_parents_excludes_subtree(self):
        root = create_page(title="Root")
        child = create_page(title="Child", parent=root)
        other = create_page(title="Other")

        available = PageService.available_parents(root.pk)

        self.assertEqual([page.pk for page in available], [other.pk])
        self.assertNotIn(child.pk, [page.pk for page in available])

    def test_for_selection_indents_titles(self):
        root = create_page(title="Root")
        create_page(title="Child", parent=root)

        selection = PageService.for_selection()

        self.assertEqual(selection[1]["title"], "— Child")
        self.assertEqual(selection[1]["depth"], 1)
