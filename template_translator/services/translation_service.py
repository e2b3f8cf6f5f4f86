"""
/**
 * @file template_translator/services/translation_service.py
 * @description 模板翻译编排：获取源模板 -> 提取占位符 -> 并发翻译各文件 -> 并发上传新模板。
 */
"""

from __future__ import annotations

import concurrent.futures
import contextvars
import logging
import threading
from typing import Callable, Dict, List, Optional, Sequence

from template_translator.config import Settings, load_settings
from template_translator.exceptions import (
    DuplicateTranslationError,
    EmptyTemplateContentError,
    TemplateVersionNotFoundError,
)
from template_translator.models.translation_model import TranslationFile, TranslationResult
from template_translator.services.sendgrid_client_service import SendGridClient
from template_translator.services.token_service import extract_translation_keys, translate_text
from template_translator.services.translation_file_service import parse_translation_file
from template_translator.utils import derive_translation_id

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, Optional[threading.Event]], SendGridClient]


def _submit(executor: concurrent.futures.Executor, fn, *args):
    # Each task gets its own copy so the correlation ID follows it into the worker thread
    return executor.submit(contextvars.copy_context().run, fn, *args)


class TranslationService:
    """Generates translated copies of a SendGrid template from uploaded translation files."""

    def __init__(self, settings: Optional[Settings] = None, client_factory: Optional[ClientFactory] = None):
        self._initial_settings = settings
        self._client_factory = client_factory or self._default_client_factory

    @property
    def settings(self) -> Settings:
        return self._initial_settings or load_settings()

    def _default_client_factory(self, api_key: str, cancel_event: Optional[threading.Event]) -> SendGridClient:
        return SendGridClient(api_key, settings=self._initial_settings, cancel_event=cancel_event)

    def translate(
        self,
        send_grid_api_key: str,
        template_id: str,
        version_id: str,
        files: Sequence[TranslationFile],
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, Optional[str]]:
        """
        Returns translation IDs mapped to the IDs of the generated templates.
        A failed upload maps to None; every other failure aborts the request.
        """
        with self._client_factory(send_grid_api_key, cancel_event) as client:
            template = client.get_template(template_id)

            version = template.find_version(version_id)
            if version is None:
                raise TemplateVersionNotFoundError(f"Template version {version_id} not found in template {template_id}")
            if not version.html_content:
                raise EmptyTemplateContentError(f"Template version {version_id} content is empty")

            content_keys = extract_translation_keys(version.html_content)
            subject_keys = extract_translation_keys(version.subject, required=False)
            logger.info(
                f"Template {template.id} version {version.id}: {len(set(content_keys))} content keys, "
                f"{len(set(subject_keys))} subject keys, {len(files)} translation files"
            )

            with concurrent.futures.ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
                translations = self._translate_files(
                    executor, files, version.html_content, version.subject, content_keys, subject_keys
                )
                return self._upload_translations(executor, send_grid_api_key, cancel_event, template.name, translations)

    def _translate_files(
        self,
        executor: concurrent.futures.Executor,
        files: Sequence[TranslationFile],
        content: str,
        subject: Optional[str],
        content_keys: List[str],
        subject_keys: List[str],
    ) -> List[TranslationResult]:
        futures = [
            _submit(executor, _translate_file, i + 1, f, content, subject, content_keys, subject_keys)
            for i, f in enumerate(files)
        ]
        concurrent.futures.wait(futures)

        results: List[TranslationResult] = []
        seen: Dict[str, str] = {}
        for future in futures:
            result = future.result()
            if result.translation_id in seen:
                raise DuplicateTranslationError(
                    f"Files {seen[result.translation_id]} and {result.filename} "
                    f"both resolve to translation {result.translation_id}"
                )
            seen[result.translation_id] = result.filename
            results.append(result)

        results.sort(key=lambda r: r.translation_id)
        return results

    def _upload_translations(
        self,
        executor: concurrent.futures.Executor,
        send_grid_api_key: str,
        cancel_event: Optional[threading.Event],
        template_name: str,
        translations: List[TranslationResult],
    ) -> Dict[str, Optional[str]]:
        # requests.Session is not thread-safe, so every upload gets its own client
        futures = [
            _submit(executor, self._upload_translation, send_grid_api_key, cancel_event, template_name, t)
            for t in translations
        ]
        concurrent.futures.wait(futures)

        generated: Dict[str, Optional[str]] = {}
        for translation, future in zip(translations, futures):
            generated[translation.translation_id] = future.result()

        success_count = sum(1 for v in generated.values() if v is not None)
        logger.info(f"Successfully uploaded {success_count} out of {len(generated)} translations")
        return generated

    def _upload_translation(
        self,
        send_grid_api_key: str,
        cancel_event: Optional[threading.Event],
        template_name: str,
        translation: TranslationResult,
    ) -> Optional[str]:
        name = f"{template_name} - translation {translation.translation_id}"
        try:
            with self._client_factory(send_grid_api_key, cancel_event) as client:
                created = client.create_template(name)
                client.create_template_version(created.id, None, translation.subject, translation.content)
        except Exception as e:
            logger.warning(f"Failed to upload translation {translation.translation_id} as template {name}: {e}")
            return None
        logger.info(f"Created template {created.id} ({name}) from {translation.filename}")
        return created.id


def _translate_file(
    ordinal: int,
    file: TranslationFile,
    content: str,
    subject: Optional[str],
    content_keys: List[str],
    subject_keys: List[str],
) -> TranslationResult:
    translation_id = derive_translation_id(file.filename, ordinal)
    translations = parse_translation_file(file)
    return TranslationResult(
        translation_id=translation_id,
        content=translate_text(content, content_keys, translations, source=file.filename),
        subject=translate_text(subject, subject_keys, translations, source=file.filename),
        filename=file.filename,
    )
