# -*- coding: utf-8 -*-
"""
Video job lifecycle.

    CREATED -> POLLING -> DONE | FAILED | TIMEOUT

A submitted job is re-read every `interval` seconds, at most `max_attempts`
times. DONE without a result URI means the provider filtered the output and
is reported as SafetyRejection. A DONE job with a URI still needs one more
credentialed download before there are bytes to return.
"""
import asyncio
from typing import Awaitable, Callable

from storyboard.data_models import GenerationJob, JobState, MediaAsset
from storyboard.errors import GenerationFailure, GenerationTimeout, SafetyRejection
from storyboard.logger import get_logger

logger = get_logger("video_jobs")

TERMINAL_STATES = (JobState.DONE, JobState.FAILED, JobState.TIMEOUT)

Sleep = Callable[[float], Awaitable[None]]


class VideoJobPoller:
    def __init__(self, router, interval: float = 5.0, max_attempts: int = 24, sleep: Sleep = asyncio.sleep):
        self.router = router
        self.interval = interval
        self.max_attempts = max_attempts
        self.sleep = sleep

    async def advance(self, job: GenerationJob) -> GenerationJob:
        """Perform exactly one transition on a non-terminal job."""
        if job.state == JobState.CREATED:
            job.state = JobState.POLLING
            return job

        if job.state != JobState.POLLING:
            return job

        status = self.router.video_status(job.handle)
        if status.done:
            if status.error:
                job.state = JobState.FAILED
                job.error = status.error
            else:
                job.state = JobState.DONE
                job.result_uri = status.result_uri
            return job

        if job.attempts >= self.max_attempts:
            job.state = JobState.TIMEOUT
            return job

        await self.sleep(self.interval)
        job.handle = await asyncio.to_thread(self.router.poll_video, job.handle)
        job.attempts += 1
        logger.debug("video job poll %d/%d", job.attempts, self.max_attempts)
        return job

    async def wait(self, job: GenerationJob) -> str:
        """Drive the job to a terminal state; return the result URI or raise."""
        while job.state not in TERMINAL_STATES:
            await self.advance(job)

        if job.state == JobState.TIMEOUT:
            raise GenerationTimeout(job.attempts, self.interval)
        if job.state == JobState.FAILED:
            raise GenerationFailure("video", job.error or "Video generation failed")
        if not job.result_uri:
            raise SafetyRejection("video job finished without a result (likely blocked by content policy)")
        logger.info("video job done after %d polls", job.attempts)
        return job.result_uri

    async def run(self, handle) -> MediaAsset:
        job = GenerationJob(handle=handle)
        uri = await self.wait(job)
        return await asyncio.to_thread(self.router.fetch_video, uri)
