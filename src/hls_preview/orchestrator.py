"""
Job orchestration: run one preview job end to end as a detached asyncio task.

Stages: accepted -> fetching -> parsing -> sampling -> retrieving -> compositing
-> publishing -> recording -> done. Any stage may end the job as failed. Errors
are logged with stage context and never reach the caller that spawned the job;
the only externally visible outcome is the video's preview_url.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from .compositor import EncoderFactory, compose_preview
from .config import PreviewConfig
from .errors import PreviewError, RecordError
from .ffmpeg_encoder import FfmpegEncoder
from .interfaces import ObjectStorage, VideoStore
from .models import JobRun, JobStage, PreviewJob
from .playlist import fetch_media_playlist, parse_manifest
from .publisher import build_preview_asset, publish_preview
from .recorder import record_preview
from .retriever import retrieve_segments
from .sampler import choose_sample_count, sample_segments

logger = logging.getLogger(__name__)


class PreviewOrchestrator:
    """Coordinates the pipeline stages for preview jobs; one task per job, no shared state."""

    def __init__(
        self,
        config: PreviewConfig,
        client: httpx.AsyncClient,
        storage: ObjectStorage,
        video_store: VideoStore,
        *,
        encoder_factory: EncoderFactory = FfmpegEncoder,
        owns_client: bool = False,
    ) -> None:
        self.config = config
        self._client = client
        self._storage = storage
        self._video_store = video_store
        self._encoder_factory = encoder_factory
        self._owns_client = owns_client
        self._tasks: set[asyncio.Task[JobRun]] = set()

    @property
    def active_jobs(self) -> int:
        return len(self._tasks)

    def _enter(self, run: JobRun, stage: JobStage) -> None:
        run.stage = stage
        logger.debug("job: video_id=%s stage=%s", run.job.video_id, stage.value)

    async def run(self, job: PreviewJob) -> JobRun:
        """Execute every stage for job. Never raises for pipeline failures."""
        run = JobRun(job=job)
        video_id = job.video_id
        logger.info("job: video_id=%s accepted title=%s hls_url=%s", video_id, job.title, job.hls_url)
        try:
            self._enter(run, JobStage.FETCHING)
            text, media_url = await fetch_media_playlist(
                self._client, job.hls_url, min_width=self.config.width
            )

            self._enter(run, JobStage.PARSING)
            manifest = parse_manifest(text, media_url)
            logger.info(
                "job: video_id=%s playlist has %s segments (%.1fs)",
                video_id,
                len(manifest.segment_urls),
                manifest.total_duration_sec,
            )

            self._enter(run, JobStage.SAMPLING)
            k = choose_sample_count(self.config.sample_count, self.config.max_samples)
            urls = sample_segments(manifest.segment_urls, k)

            self._enter(run, JobStage.RETRIEVING)
            segments = await retrieve_segments(
                self._client, urls, init_url=manifest.init_url
            )

            self._enter(run, JobStage.COMPOSITING)
            data = await asyncio.to_thread(
                compose_preview, segments, self._encoder_factory(), self.config
            )

            self._enter(run, JobStage.PUBLISHING)
            asset = build_preview_asset(video_id, data)
            run.preview_key = await publish_preview(self._storage, asset)

            self._enter(run, JobStage.RECORDING)
            run.preview_url = await record_preview(
                self._video_store, video_id, self.config.cdn_base, run.preview_key
            )
        except RecordError as e:
            self._fail(run, e)
            logger.error(
                "job: video_id=%s partial failure: preview stored at %s but video record "
                "not updated; reconcile manually",
                video_id,
                run.preview_key,
            )
            return run
        except PreviewError as e:
            self._fail(run, e)
            return run
        except Exception as e:
            run.failed_stage = run.stage
            run.stage = JobStage.FAILED
            run.error = f"{type(e).__name__}: {e}"
            logger.exception(
                "job: video_id=%s unexpected error at stage=%s", video_id, run.failed_stage.value
            )
            return run

        run.stage = JobStage.DONE
        logger.info("job: video_id=%s done preview_url=%s", video_id, run.preview_url)
        return run

    def _fail(self, run: JobRun, error: PreviewError) -> None:
        run.failed_stage = run.stage
        run.stage = JobStage.FAILED
        run.error = f"{type(error).__name__}: {error}"
        logger.error(
            "job: video_id=%s failed at stage=%s: %s",
            run.job.video_id,
            run.failed_stage.value,
            run.error,
        )

    def spawn(self, job: PreviewJob) -> asyncio.Task[JobRun]:
        """Start run(job) in the background and return immediately."""
        task = asyncio.create_task(self.run(job), name=f"preview-{job.video_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> list[JobRun]:
        """Wait for every job currently in flight."""
        if not self._tasks:
            return []
        return list(await asyncio.gather(*list(self._tasks)))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
