"""Tests for filtering, sorting and paginating tasks."""

import pytest

from cxd_canvas.errors import TaskQueryError
from cxd_canvas.schemas.base import TaskPriority, TaskStatus
from cxd_canvas.schemas.query import (
    DEFAULT_SORT,
    DateRange,
    SortDirection,
    TaskFilter,
    TaskQuery,
    TaskSort,
)
from cxd_canvas.tasks.projection import project_element_as_tasks
from cxd_canvas.tasks.query import apply_filters, apply_sorting, paginate, query_tasks


@pytest.fixture
def grocery_elements(element_factory):
    return [element_factory("groceries", content="- [ ] Buy milk\n- [x] Call Bob")]


@pytest.fixture
def prioritized_elements(element_factory):
    """Aggregate tasks with distinct priorities and due dates, in canvas order."""
    return [
        element_factory("low", content="- [ ] low", taskMetadata={"priority": "low"}),
        element_factory(
            "urgent",
            content="- [ ] urgent",
            taskMetadata={"priority": "urgent", "dueDate": "2024-02-01"},
        ),
        element_factory("none", content="- [ ] none"),
        element_factory(
            "medium",
            content="- [ ] medium",
            taskMetadata={"priority": "medium", "dueDate": "2024-01-01"},
        ),
        element_factory(
            "high",
            content="- [ ] high",
            taskMetadata={"priority": "high", "dueDate": "2024-03-01T10:00:00Z"},
        ),
    ]


def _ids(tasks):
    return [t.id for t in tasks]


class TestQueryTasks:
    def test_hide_completed(self, grocery_elements):
        """Test hiding completed tasks."""
        result = query_tasks(grocery_elements, TaskQuery(filter=TaskFilter(show_completed=False)))
        assert result.total == 1
        assert _ids(result.tasks) == ["groceries-task-0"]
        assert result.tasks[0].title == "Buy milk"

    def test_show_completed(self, grocery_elements):
        """Test showing completed tasks."""
        result = query_tasks(grocery_elements, TaskQuery(filter=TaskFilter(show_completed=True)))
        assert result.total == 2
        assert result.tasks[1].status == TaskStatus.COMPLETED

    def test_empty_filter_keeps_every_task(self, element_factory):
        """Test that an empty filter keeps every task."""
        elements = [
            element_factory("a", content="- [ ] 1\n- [x] 2\n- [ ] 3"),
            element_factory("b", content="note", hypercubeTags=["Trait Mapping"]),
        ]
        result = query_tasks(elements, TaskQuery())
        assert result.total == 3

    def test_total_is_counted_before_pagination(self, prioritized_elements):
        """Test counting the total before pagination."""
        result = query_tasks(prioritized_elements, TaskQuery(limit=2, offset=1))
        assert result.total == 5
        assert _ids(result.tasks) == ["urgent", "none"]

    def test_no_sort_keeps_canvas_order(self, prioritized_elements):
        """Test keeping canvas order without a sort."""
        result = query_tasks(prioritized_elements, TaskQuery())
        assert _ids(result.tasks) == ["low", "urgent", "none", "medium", "high"]

    def test_query_is_idempotent(self, prioritized_elements):
        """Test that repeating a query gives the same result."""
        query = TaskQuery(sort=list(DEFAULT_SORT), limit=3)
        first = query_tasks(prioritized_elements, query)
        second = query_tasks(prioritized_elements, query)
        assert _ids(first.tasks) == _ids(second.tasks)
        assert first.total == second.total

    def test_result_to_dict(self, grocery_elements):
        """Test converting a result to a dictionary."""
        data = query_tasks(grocery_elements, TaskQuery()).to_dict()
        assert data["total"] == 2
        assert data["tasks"][0]["sourceElementId"] == "groceries"
        assert "priority" not in data["tasks"][0]


class TestFilters:
    def _tasks(self, element_factory):
        elements = [
            element_factory(
                "a",
                content="- [ ] Write brief",
                hypercubeTags=["State Mapping", "Trait Mapping"],
                taskMetadata={"assignee": "ana", "priority": "high", "customTags": ["ops"]},
            ),
            element_factory(
                "b",
                content="- [x] Review Brief",
                boardId="board-1",
                hypercubeTags=["State Mapping"],
                taskMetadata={"dueDate": "2024-01-10"},
            ),
            element_factory(
                "c",
                content="- [ ] Ship",
                taskMetadata={"status": "blocked", "dueDate": "2024-02-10"},
            ),
        ]
        tasks = []
        for element in elements:
            tasks.extend(project_element_as_tasks(element))
        return tasks

    def test_statuses(self, element_factory):
        """Test filtering by status."""
        tasks = self._tasks(element_factory)
        result = apply_filters(tasks, TaskFilter(statuses=[TaskStatus.BLOCKED]))
        assert _ids(result) == ["c"]

    def test_faces_any(self, element_factory):
        """Test matching any listed face."""
        tasks = self._tasks(element_factory)
        result = apply_filters(tasks, TaskFilter(hypercube_faces=["Trait Mapping", "State Mapping"]))
        assert _ids(result) == ["a", "b"]

    def test_faces_all(self, element_factory):
        """Test requiring every listed face."""
        tasks = self._tasks(element_factory)
        result = apply_filters(
            tasks,
            TaskFilter(hypercube_faces=["Trait Mapping", "State Mapping"], require_all_faces=True),
        )
        assert _ids(result) == ["a"]

    def test_priorities_exclude_unprioritized(self, element_factory):
        """Test that a priority filter drops unprioritized tasks."""
        tasks = self._tasks(element_factory)
        assert _ids(apply_filters(tasks, TaskFilter(priorities=[TaskPriority.HIGH]))) == ["a"]

    def test_assignees(self, element_factory):
        """Test filtering by assignee."""
        tasks = self._tasks(element_factory)
        assert _ids(apply_filters(tasks, TaskFilter(assignees=["ana"]))) == ["a"]

    def test_search_is_case_insensitive(self, element_factory):
        """Test case insensitive search."""
        tasks = self._tasks(element_factory)
        assert _ids(apply_filters(tasks, TaskFilter(search_query="BRIEF"))) == ["a", "b"]

    def test_blank_search_is_ignored(self, element_factory):
        """Test ignoring a blank search."""
        tasks = self._tasks(element_factory)
        assert len(apply_filters(tasks, TaskFilter(search_query="   "))) == 3

    def test_board_ids_use_root_for_unboarded(self, element_factory):
        """Test matching root canvas tasks with the root board id."""
        tasks = self._tasks(element_factory)
        assert _ids(apply_filters(tasks, TaskFilter(board_ids=["board-1"]))) == ["b"]
        assert _ids(apply_filters(tasks, TaskFilter(board_ids=["root"]))) == ["a", "c"]

    def test_custom_tags(self, element_factory):
        """Test filtering by custom tag."""
        tasks = self._tasks(element_factory)
        assert _ids(apply_filters(tasks, TaskFilter(custom_tags=["ops", "x"]))) == ["a"]

    def test_due_date_range(self, element_factory):
        """Test filtering by a closed due date range."""
        tasks = self._tasks(element_factory)
        result = apply_filters(
            tasks, TaskFilter(due_date_range=DateRange(start="2024-01-01", end="2024-01-31"))
        )
        assert _ids(result) == ["b"]

    def test_due_date_open_end(self, element_factory):
        """Test filtering by an open ended due date range."""
        tasks = self._tasks(element_factory)
        result = apply_filters(tasks, TaskFilter(due_date_range=DateRange(start="2024-02-01")))
        assert _ids(result) == ["c"]

    def test_due_date_range_excludes_undated(self, element_factory):
        """Test that a due date range drops undated tasks."""
        tasks = self._tasks(element_factory)
        result = apply_filters(tasks, TaskFilter(due_date_range=DateRange(end="2030-01-01")))
        assert "a" not in _ids(result)

    def test_empty_lists_do_not_filter(self, element_factory):
        tasks = self._tasks(element_factory)
        result = apply_filters(tasks, TaskFilter(statuses=[], hypercube_faces=[], assignees=[]))
        assert len(result) == 3

    def test_filters_combine(self, element_factory):
        """Test combining filters."""
        tasks = self._tasks(element_factory)
        result = apply_filters(
            tasks, TaskFilter(hypercube_faces=["State Mapping"], show_completed=False)
        )
        assert _ids(result) == ["a"]


class TestSorting:
    def _tasks(self, elements):
        tasks = []
        for element in elements:
            tasks.extend(project_element_as_tasks(element))
        return tasks

    def test_priority_desc_puts_urgent_first(self, prioritized_elements):
        """Test sorting urgent tasks first."""
        tasks = self._tasks(prioritized_elements)
        result = apply_sorting(tasks, [TaskSort(field="priority", direction=SortDirection.DESC)])
        assert _ids(result) == ["urgent", "high", "medium", "low", "none"]

    def test_priority_asc_keeps_missing_last(self, prioritized_elements):
        """Test keeping unprioritized tasks last in ascending order."""
        tasks = self._tasks(prioritized_elements)
        result = apply_sorting(tasks, [TaskSort(field="priority")])
        assert _ids(result) == ["low", "medium", "high", "urgent", "none"]

    def test_due_date_asc_nulls_last(self, prioritized_elements):
        """Test sorting by due date ascending."""
        tasks = self._tasks(prioritized_elements)
        result = apply_sorting(tasks, [TaskSort(field="dueDate")])
        assert _ids(result) == ["medium", "urgent", "high", "low", "none"]

    def test_due_date_desc_nulls_last(self, prioritized_elements):
        """Test sorting by due date descending."""
        tasks = self._tasks(prioritized_elements)
        result = apply_sorting(tasks, [TaskSort(field="due_date", direction=SortDirection.DESC)])
        assert _ids(result) == ["high", "urgent", "medium", "low", "none"]

    def test_start_date_sort_keeps_undated_last(self, element_factory):
        """Test sorting by start date with undated tasks last."""
        tasks = self._tasks(
            [
                element_factory("s", content="- [ ] s", taskMetadata={"startDate": "2024-03-10"}),
                element_factory("n", content="- [ ] n"),
                element_factory("t", content="- [ ] t", taskMetadata={"startDate": "2024-01-10"}),
            ]
        )
        ascending = apply_sorting(tasks, [TaskSort(field="startDate")])
        descending = apply_sorting(
            tasks, [TaskSort(field="start_date", direction=SortDirection.DESC)]
        )
        assert _ids(ascending) == ["t", "s", "n"]
        assert _ids(descending) == ["s", "t", "n"]

    def test_title_sort_is_case_insensitive(self, element_factory):
        """Test case insensitive title sort."""
        tasks = self._tasks(
            [
                element_factory("1", content="- [ ] banana"),
                element_factory("2", content="- [ ] Apple"),
                element_factory("3", content="- [ ] cherry"),
            ]
        )
        result = apply_sorting(tasks, [TaskSort(field="title")])
        assert [t.title for t in result] == ["Apple", "banana", "cherry"]

    def test_status_sort_follows_workflow(self, element_factory):
        """Test sorting statuses in workflow order."""
        tasks = self._tasks(
            [
                element_factory("done", content="- [x] a"),
                element_factory("blocked", content="- [ ] b", taskMetadata={"status": "blocked"}),
                element_factory("todo", content="- [ ] c"),
                element_factory("doing", content="- [x] d\n", taskMetadata={"status": "in_progress"}),
            ]
        )
        result = apply_sorting(tasks, [TaskSort(field="status")])
        assert _ids(result) == ["todo", "doing", "blocked", "done"]

    def test_completion_sort(self, element_factory):
        """Test sorting by completion percentage."""
        tasks = self._tasks(
            [
                element_factory(
                    "half",
                    content="x",
                    taskMetadata={
                        "isActionable": True,
                        "subtasks": [
                            {"id": "1", "text": "a", "isCompleted": True},
                            {"id": "2", "text": "b"},
                        ]
                    },
                ),
                element_factory("zero", content="- [ ] a"),
                element_factory("full", content="- [x] a"),
            ]
        )
        result = apply_sorting(tasks, [TaskSort(field="completionPercent", direction="desc")])
        assert _ids(result) == ["full", "half", "zero"]

    def test_stable_for_equal_keys(self, element_factory):
        """Test that equal keys keep their order."""
        tasks = self._tasks(
            [element_factory(str(i), content=f"- [ ] same {i}") for i in range(5)]
        )
        result = apply_sorting(tasks, [TaskSort(field="priority", direction=SortDirection.DESC)])
        assert _ids(result) == ["0", "1", "2", "3", "4"]

    def test_secondary_key_breaks_ties(self, element_factory):
        """Test breaking ties with a second sort key."""
        tasks = self._tasks(
            [
                element_factory("late", content="- [ ] a", taskMetadata={"priority": "high", "dueDate": "2024-06-01"}),
                element_factory("early", content="- [ ] b", taskMetadata={"priority": "high", "dueDate": "2024-01-01"}),
                element_factory("top", content="- [ ] c", taskMetadata={"priority": "urgent"}),
            ]
        )
        result = apply_sorting(tasks, list(DEFAULT_SORT))
        assert _ids(result) == ["top", "early", "late"]

    def test_unknown_field_keeps_order(self, prioritized_elements):
        """Test that an unknown sort field keeps order."""
        tasks = self._tasks(prioritized_elements)
        result = apply_sorting(tasks, [TaskSort(field="nonexistent")])
        assert _ids(result) == _ids(tasks)

    def test_sorting_does_not_mutate_input(self, prioritized_elements):
        tasks = self._tasks(prioritized_elements)
        before = _ids(tasks)
        apply_sorting(tasks, [TaskSort(field="title", direction=SortDirection.DESC)])
        assert _ids(tasks) == before


class TestPaginate:
    def test_offset_then_limit(self, prioritized_elements):
        """Test applying offset before limit."""
        tasks = query_tasks(prioritized_elements, TaskQuery()).tasks
        assert _ids(paginate(tasks, 1, 2)) == ["urgent", "none"]

    def test_limit_zero(self, prioritized_elements):
        """Test a zero limit."""
        tasks = query_tasks(prioritized_elements, TaskQuery()).tasks
        assert paginate(tasks, None, 0) == []

    def test_offset_past_end(self, prioritized_elements):
        """Test an offset past the last task."""
        tasks = query_tasks(prioritized_elements, TaskQuery()).tasks
        assert paginate(tasks, 10, None) == []

    def test_negative_values_rejected(self):
        """Test rejecting negative offset and limit."""
        with pytest.raises(TaskQueryError):
            paginate([], -1, None)
        with pytest.raises(TaskQueryError):
            paginate([], None, -5)
