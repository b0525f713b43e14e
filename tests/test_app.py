import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from matricpulse.app import app, get_assistant
from matricpulse.services.ai_service import AIServiceError, Citation


class StubAssistant:
    def __init__(self, error=None):
        self.error = error
        self.prompts = []

    def respond(self, prompt, context=None):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return "Keep going!"

    def search(self, query, context=None):
        self.prompts.append(query)
        if self.error:
            raise self.error
        return "Found it", [Citation("https://www.nsfas.org.za", "NSFAS")]


class APIBaseTests(unittest.TestCase):
    def setUp(self):
        self.assistant = StubAssistant()
        app.dependency_overrides[get_assistant] = lambda: self.assistant
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class CatalogEndpointTests(APIBaseTests):
    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_catalogs(self):
        self.assertIn("Life Orientation", self.client.get("/catalog/subjects").json())
        self.assertEqual(len(self.client.get("/catalog/languages").json()), 11)
        sections = self.client.get("/crisis/contacts").json()
        self.assertEqual(sections[0]["contacts"][0]["dial"], "0861322322")


class APSEndpointTests(APIBaseTests):
    def test_empty(self):
        res = self.client.post("/aps", json={"subjects": []})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"totalScore": 0, "breakdown": [], "subjects": []})

    def test_out_of_range_percents_are_clamped(self):
        res = self.client.post(
            "/aps",
            json={"subjects": [{"name": "Mathematics", "percent": 150}, {"name": "History", "percent": -20}]},
        )
        body = res.json()
        self.assertEqual(body["totalScore"], 7)
        self.assertEqual(body["subjects"], [{"name": "Mathematics", "percent": 100}])
        self.assertEqual(body["breakdown"], [{"subjectName": "Mathematics", "points": 7}])

    def test_fractional_percent_is_truncated(self):
        res = self.client.post("/aps", json={"subjects": [{"name": "Mathematics", "percent": 79.6}]})
        body = res.json()
        self.assertEqual(body["totalScore"], 6)
        self.assertEqual(body["subjects"], [{"name": "Mathematics", "percent": 79}])

    def test_non_finite_percents_count_as_unentered(self):
        for token in ("NaN", "Infinity", "-Infinity"):
            with self.subTest(token=token):
                raw = '{"subjects": [{"name": "Mathematics", "percent": ' + token + '}, {"name": "History", "percent": 61}]}'
                res = self.client.post("/aps", content=raw, headers={"Content-Type": "application/json"})
                self.assertEqual(res.status_code, 200)
                self.assertEqual(res.json()["subjects"], [{"name": "History", "percent": 61}])
                self.assertEqual(res.json()["totalScore"], 5)

    def test_universities_with_non_finite_percent(self):
        raw = '{"subjects": [{"name": "Mathematics", "percent": NaN}, {"name": "Geography", "percent": 70}]}'
        res = self.client.post("/ai/universities", content=raw, headers={"Content-Type": "application/json"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["aps"]["totalScore"], 6)


class AIEndpointTests(APIBaseTests):
    def test_universities_scores_then_matches(self):
        res = self.client.post(
            "/ai/universities",
            json={"subjects": [{"name": "Mathematics", "percent": 80}, {"name": "Life Orientation", "percent": 70}]},
        )
        body = res.json()
        self.assertEqual(body["aps"]["totalScore"], 10)
        self.assertEqual(body["response"]["citations"], [{"uri": "https://www.nsfas.org.za", "title": "NSFAS"}])
        self.assertIn("Total APS Score: 10", self.assistant.prompts[0])

    def test_universities_needs_subjects(self):
        res = self.client.post("/ai/universities", json={"subjects": [{"name": "Mathematics", "percent": 0}]})
        self.assertEqual(res.status_code, 400)

    def test_study_needs_input(self):
        self.assertEqual(self.client.post("/ai/study", json={"text": "  "}).status_code, 400)
        self.assertEqual(self.client.post("/ai/study", json={"text": "mitosis"}).json()["text"], "Found it")

    def test_opportunities_unavailable(self):
        self.assistant.error = AIServiceError("AI_SERVICE_UNAVAILABLE")
        res = self.client.post("/ai/opportunities", json={"query": "bursaries"})
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.json()["unavailable"])

    def test_mentor_chat(self):
        res = self.client.post(
            "/ai/mentor",
            json={"history": [{"role": "user", "text": "Hi"}], "message": "Exam tips?", "language": "Sesotho"},
        )
        self.assertEqual(res.json()["text"], "Keep going!")

    def test_mentor_rejects_unknown_role(self):
        res = self.client.post("/ai/mentor", json={"history": [{"role": "system", "text": "x"}], "message": "hi"})
        self.assertEqual(res.status_code, 422)


class AssistantConfigTests(unittest.TestCase):
    def test_missing_key_gives_503(self):
        client = TestClient(app)
        with patch(
            "matricpulse.app.GeminiAssistant.from_settings",
            side_effect=AIServiceError("AI_SERVICE_NOT_CONFIGURED"),
        ):
            res = client.post("/ai/opportunities", json={"query": "bursaries"})
        self.assertEqual(res.status_code, 503)
        self.assertEqual(res.json()["detail"], "AI_SERVICE_NOT_CONFIGURED")


if __name__ == "__main__":
    unittest.main()
