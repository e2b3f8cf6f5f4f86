"""
/**
 * @file template_translator/tests/test_translation_service.py
 * @description 翻译编排服务单元测试（使用假客户端，避免真实网络请求）。
 */
"""

import json
import threading
import unittest
from unittest.mock import Mock

from template_translator.config import Settings
from template_translator.exceptions import (
    DuplicateTranslationError,
    EmptyTemplateContentError,
    NoTranslationKeysError,
    TemplateApiError,
    TemplateVersionNotFoundError,
    UnsupportedTranslationFileError,
)
from template_translator.models import Template, TemplateVersion, TranslationFile
from template_translator.services.sendgrid_client_service import SendGridClient
from template_translator.services.translation_service import TranslationService

SETTINGS = Settings(raw={"executor": {"max_workers": 4}})


class FakeSendGridClient:
    def __init__(self, template, fail_names=()):
        self.template = template
        self.fail_names = set(fail_names)
        self.created_templates = []
        self.created_versions = []
        self.closed = False
        self._lock = threading.Lock()
        self._counter = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def get_template(self, template_id):
        if template_id != self.template.id:
            raise TemplateApiError("Failed to retrieve template", status_code=404)
        return self.template

    def create_template(self, name):
        if name in self.fail_names:
            raise TemplateApiError("Failed to create template", status_code=500)
        with self._lock:
            self._counter += 1
            created = Template(id=f"d-new-{self._counter}", name=name)
            self.created_templates.append(created)
        return created

    def create_template_version(self, template_id, name, subject, html_content):
        with self._lock:
            self.created_versions.append((template_id, name, subject, html_content))
        return TemplateVersion(id=f"v-{template_id}", template_id=template_id, subject=subject, html_content=html_content)


def _template(html="<p>[[ greeting.hi ]], [[name]]</p>", subject="[[subject]]"):
    return Template(
        id="d-src",
        name="Welcome",
        versions=[TemplateVersion(id="v-src", subject=subject, html_content=html)],
    )


def _file(name, value):
    return TranslationFile(filename=name, content=json.dumps(value).encode("utf-8"))


class TestTranslationService(unittest.TestCase):
    def _service(self, client):
        self.factory_calls = []

        def factory(api_key, cancel_event):
            self.factory_calls.append((api_key, cancel_event))
            return client

        return TranslationService(settings=SETTINGS, client_factory=factory)

    def test_translates_and_uploads_each_file(self):
        client = FakeSendGridClient(_template())
        files = [
            _file("messages.fr.json", {"greeting": {"hi": "Bonjour"}, "name": "Ami", "subject": "Bienvenue"}),
            _file("messages.de.json", {"greeting": {"hi": "Hallo"}}),
        ]
        result = self._service(client).translate("SG.key", "d-src", "v-src", files)

        self.assertEqual(list(result.keys()), ["de", "fr"])
        self.assertTrue(all(result.values()))
        self.assertTrue(client.closed)
        self.assertEqual(self.factory_calls[0][0], "SG.key")
        # one client for the source template, one per upload
        self.assertEqual(len(self.factory_calls), 3)

        names = sorted(t.name for t in client.created_templates)
        self.assertEqual(names, ["Welcome - translation de", "Welcome - translation fr"])

        versions = {content: (name, subject) for _, name, subject, content in client.created_versions}
        self.assertEqual(versions["<p>Bonjour, Ami</p>"], (None, "Bienvenue"))
        # untranslated tokens stay as they were
        self.assertEqual(versions["<p>Hallo, [[name]]</p>"], (None, "[[subject]]"))

    def test_ordinal_identifier_for_unnamed_files(self):
        client = FakeSendGridClient(_template())
        files = [_file("a.json", {"name": "A"}), _file("b.json", {"name": "B"}), _file("file3.json", {"name": "C"})]
        result = self._service(client).translate("SG.key", "d-src", "v-src", files)
        self.assertEqual(list(result.keys()), ["1", "2", "3"])

    def test_one_failed_upload_does_not_block_siblings(self):
        client = FakeSendGridClient(_template(), fail_names={"Welcome - translation es"})
        files = [_file("es.json", {"name": "Amigo"}), _file("it.json", {"name": "Amico"})]

        with self.assertLogs("template_translator.services.translation_service", level="INFO") as logs:
            result = self._service(client).translate("SG.key", "d-src", "v-src", files)

        self.assertIsNone(result["es"])
        self.assertIsNotNone(result["it"])
        self.assertEqual(len(client.created_versions), 1)
        self.assertTrue(any("Successfully uploaded 1 out of 2 translations" in line for line in logs.output))

    def test_empty_subject_is_allowed(self):
        client = FakeSendGridClient(_template(subject=None))
        result = self._service(client).translate("SG.key", "d-src", "v-src", [_file("fr.json", {"name": "Ami"})])
        self.assertIsNotNone(result["fr"])
        self.assertIsNone(client.created_versions[0][2])

    def test_no_tokens_fails_before_processing_files(self):
        client = FakeSendGridClient(_template(html="<p>Nothing to translate</p>"))
        broken = TranslationFile(filename="fr.txt", content=b"not even parsed")
        with self.assertRaises(NoTranslationKeysError):
            self._service(client).translate("SG.key", "d-src", "v-src", [broken])
        self.assertEqual(client.created_templates, [])

    def test_version_not_found(self):
        client = FakeSendGridClient(_template())
        with self.assertRaises(TemplateVersionNotFoundError):
            self._service(client).translate("SG.key", "d-src", "v-missing", [_file("fr.json", {})])

    def test_empty_content(self):
        client = FakeSendGridClient(_template(html=""))
        with self.assertRaises(EmptyTemplateContentError):
            self._service(client).translate("SG.key", "d-src", "v-src", [_file("fr.json", {})])

    def test_template_not_found(self):
        client = FakeSendGridClient(_template())
        with self.assertRaises(TemplateApiError):
            self._service(client).translate("SG.key", "d-other", "v-src", [_file("fr.json", {})])
        self.assertTrue(client.closed)

    def test_unsupported_file_fails_request(self):
        client = FakeSendGridClient(_template())
        files = [_file("fr.json", {"name": "Ami"}), TranslationFile(filename="de.csv", content=b"name,Freund")]
        with self.assertRaises(UnsupportedTranslationFileError):
            self._service(client).translate("SG.key", "d-src", "v-src", files)
        self.assertEqual(client.created_templates, [])

    def test_duplicate_identifiers(self):
        client = FakeSendGridClient(_template())
        files = [_file("a.fr.json", {"name": "A"}), _file("b.fr.json", {"name": "B"})]
        with self.assertRaises(DuplicateTranslationError):
            self._service(client).translate("SG.key", "d-src", "v-src", files)

    def test_cancel_event_is_passed_to_client(self):
        client = FakeSendGridClient(_template())
        event = threading.Event()
        self._service(client).translate("SG.key", "d-src", "v-src", [_file("fr.json", {})], cancel_event=event)
        self.assertIs(self.factory_calls[0][1], event)

    def test_cancellation_before_upload_marks_every_file_failed(self):
        event = threading.Event()
        session = Mock()
        source = {
            "id": "d-src",
            "name": "Welcome",
            "versions": [{"id": "v-src", "subject": "[[subject]]", "html_content": "<p>[[name]]</p>"}],
        }

        def fetch_then_cancel(method, url, **kwargs):
            # the caller goes away right after the source template was read
            event.set()
            response = Mock()
            response.status_code = 200
            response.json.return_value = source
            return response

        session.request.side_effect = fetch_then_cancel
        service = TranslationService(
            settings=SETTINGS,
            client_factory=lambda key, ev: SendGridClient(key, settings=SETTINGS, cancel_event=ev, session=session),
        )
        files = [_file("fr.json", {"name": "Ami"}), _file("de.json", {"name": "Freund"})]

        with self.assertLogs("template_translator.services.translation_service", level="INFO") as logs:
            result = service.translate("SG.key", "d-src", "v-src", files, cancel_event=event)

        self.assertEqual(result, {"de": None, "fr": None})
        self.assertEqual(session.request.call_count, 1)
        self.assertTrue(any("Successfully uploaded 0 out of 2 translations" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
