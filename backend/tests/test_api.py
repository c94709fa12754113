from .conftest import FULL_PLAN, SCENARIO_PLAN


def _create(client, lesson_id="L1", plan=SCENARIO_PLAN):
	res = client.post("/api/lessons", json={"id": lesson_id, "lessonPlan": plan})
	assert res.status_code == 201, res.text
	return res.json()


def _answer(client, student, answer, index=1, lesson_id="L1", **extra):
	body = {"lessonId": lesson_id, "itemIndex": index, "studentId": student, "answer": answer}
	body.update(extra)
	return client.post("/api/answers", json=body)


def test_health(client):
	res = client.get("/api/health")
	assert res.status_code == 200
	assert res.json()["status"] == "OK"
	assert res.json()["timestamp"]


def test_unknown_route_returns_json_404(client):
	res = client.get("/api/nothing-here")
	assert res.status_code == 404
	assert res.json() == {"error": "Not found", "path": "/api/nothing-here"}


def test_create_and_fetch_lesson(client):
	body = _create(client)
	assert body == {"message": "Lesson created successfully", "id": "L1"}

	res = client.get("/api/lessons/L1")
	assert res.status_code == 200
	lesson = res.json()
	assert lesson["title"] == "Intro to AI"
	assert lesson["is_active"] is False
	assert lesson["lesson_plan"]["items"] == SCENARIO_PLAN["items"]


def test_create_lesson_without_id_generates_one(client):
	res = client.post("/api/lessons", json={"title": "Blank lesson"})
	assert res.status_code == 201
	lesson_id = res.json()["id"]
	assert client.get(f"/api/lessons/{lesson_id}").json()["lesson_plan"]["items"] == []


def test_create_lesson_without_title_is_400(client):
	res = client.post("/api/lessons", json={"description": "no title"})
	assert res.status_code == 400
	assert res.json()["details"] == {"missing": ["title"]}


def test_create_lesson_with_bad_plan_is_400(client):
	plan = {"title": "Broken", "items": [{"type": "poll", "pollType": "POLL_3", "question": "?"}]}
	res = client.post("/api/lessons", json={"lessonPlan": plan})
	assert res.status_code == 400
	assert res.json()["error"] == "Lesson plan does not match the expected schema"


def test_create_duplicate_lesson_id_is_500(client):
	_create(client)
	res = client.post("/api/lessons", json={"id": "L1", "lessonPlan": SCENARIO_PLAN})
	assert res.status_code == 500
	assert "already exists" in res.json()["error"]


def test_get_missing_lesson_is_404(client):
	res = client.get("/api/lessons/missing")
	assert res.status_code == 404
	assert res.json() == {"error": "Lesson not found"}


def test_list_lessons(client):
	_create(client, "L1")
	_create(client, "L2", FULL_PLAN)
	lessons = client.get("/api/lessons").json()
	assert {l["id"] for l in lessons} == {"L1", "L2"}
	assert all("lesson_plan" not in l for l in lessons)


def test_status_switches_active_lesson(client):
	_create(client, "L1")
	_create(client, "L2")
	client.patch("/api/lessons/L1/status", json={"isActive": True})

	res = client.patch("/api/lessons/L2/status", json={"isActive": True})

	assert res.status_code == 200
	assert res.json() == {"message": "Lesson activated successfully", "id": "L2", "is_active": True}
	assert client.get("/api/lessons/L1").json()["is_active"] is False
	assert client.get("/api/lessons/L2").json()["is_active"] is True


def test_deactivate(client):
	_create(client)
	client.patch("/api/lessons/L1/status", json={"isActive": True})
	res = client.patch("/api/lessons/L1/status", json={"isActive": False})
	assert res.json()["message"] == "Lesson deactivated successfully"
	assert res.json()["is_active"] is False


def test_status_on_missing_lesson_is_404(client):
	assert client.patch("/api/lessons/nope/status", json={"isActive": True}).status_code == 404


def test_status_without_flag_is_400(client):
	_create(client)
	res = client.patch("/api/lessons/L1/status", json={})
	assert res.status_code == 400
	assert res.json()["error"] == "Invalid request"


def test_submit_and_read_item_statistics(client):
	_create(client)
	for student, answer in [("s1", "A"), ("s2", "B"), ("s3", "A")]:
		res = _answer(client, student, answer)
		assert res.status_code == 201
		assert res.json()["message"] == "Answer submitted successfully"
		assert res.json()["timestamp"]

	stats = client.get("/api/answers/lesson/L1/item/1").json()
	assert stats == {
		"answers": [{"answer": "A", "count": 2}, {"answer": "B", "count": 1}],
		"totalResponses": 3,
		"itemIndex": 1,
	}


def test_duplicate_submission_is_409(client):
	_create(client)
	assert _answer(client, "s1", "A").status_code == 201
	res = _answer(client, "s1", "B")
	assert res.status_code == 409
	assert res.json() == {"error": "Answer already submitted for this item"}


def test_missing_student_id_is_400(client):
	_create(client)
	res = client.post("/api/answers", json={"lessonId": "L1", "itemIndex": 1, "answer": "A"})
	assert res.status_code == 400
	assert "studentId" in res.json()["details"]["missing"]


def test_item_index_zero_is_accepted(client):
	_create(client)
	assert _answer(client, "s1", "seen", index=0).status_code == 201


def test_out_of_range_item_index_is_400(client):
	_create(client)
	res = _answer(client, "s1", "A", index=7)
	assert res.status_code == 400
	assert res.json()["details"] == {"itemIndex": 7, "itemCount": 3}


def test_answer_for_unknown_lesson_is_404(client):
	assert _answer(client, "s1", "A", lesson_id="ghost").status_code == 404


def test_results_and_progress(client):
	_create(client)
	_answer(client, "s1", "A")
	_answer(client, "s2", "B")
	_answer(client, "s1", "Yes", index=2, itemType="quiz")

	results = client.get("/api/answers/lesson/L1/results").json()
	assert results["lesson"]["itemCount"] == 3
	assert results["uniqueStudents"] == 2
	assert [r["itemType"] for r in results["resultsByItem"]] == ["quiz", "poll"]

	progress = client.get("/api/answers/lesson/L1/student/s1").json()
	assert progress["answeredItems"] == [1, 2]
	assert [a["answer"] for a in progress["answers"]] == ["A", "Yes"]


def test_results_for_missing_lesson_is_404(client):
	assert client.get("/api/answers/lesson/ghost/results").status_code == 404


def test_delete_lesson_removes_answers(client):
	_create(client)
	_answer(client, "s1", "A")
	_answer(client, "s2", "B")

	res = client.delete("/api/lessons/L1")

	assert res.status_code == 200
	assert res.json() == {"message": "Lesson deleted successfully", "answersRemoved": 2}
	assert client.get("/api/lessons/L1").status_code == 404
	assert client.get("/api/answers/lesson/L1/item/1").json()["totalResponses"] == 0


def test_delete_missing_lesson_is_404_and_leaves_answers(client):
	_create(client)
	_answer(client, "s1", "A")

	assert client.delete("/api/lessons/ghost").status_code == 404
	assert client.get("/api/answers/lesson/L1/item/1").json()["totalResponses"] == 1


def test_student_lesson_page(client):
	_create(client, "L2", FULL_PLAN)
	res = client.get("/lesson/L2")
	assert res.status_code == 200
	assert res.headers["content-type"].startswith("text/html")
	assert "Every item kind" in res.text
	assert "Which AI topic interests you most?" in res.text


def test_student_page_for_missing_lesson_is_404(client):
	assert client.get("/lesson/ghost").status_code == 404
