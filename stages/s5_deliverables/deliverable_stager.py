"""Stage 5: Deliverables - Remote tooling and dashboard templates"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import List, Optional

import httpx

from core.interfaces import Stage
from core.models import Deliverable, DeliverableRequest, DeliverableResult
from core.enums import DeliverableKind
from core.exceptions import DeliverableFetchFailed

logger = logging.getLogger(__name__)


class DeliverableStager(Stage[DeliverableRequest, DeliverableResult]):
    """Stage 5: Fetch auxiliary files and replicate them to the shared directory"""
    
    @property
    def name(self) -> str:
        return "Stage Deliverables"
    
    @property
    def stage_number(self) -> int:
        return 5
    
    def __init__(
        self,
        deliverables: List[Deliverable],
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.deliverables = deliverables
        self.timeout = timeout
        self.transport = transport
    
    def validate_input(self, input_data: DeliverableRequest) -> bool:
        if not isinstance(input_data, DeliverableRequest):
            return False
        if input_data.stage_to_shared_dir and input_data.shared_dir is None:
            return False
        return input_data.output_directory.is_dir()
    
    async def execute(self, input_data: DeliverableRequest) -> DeliverableResult:
        """Execute deliverable staging"""
        result = DeliverableResult()
        
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            outcomes = await asyncio.gather(*[
                self._fetch(client, deliverable, input_data.output_directory)
                for deliverable in self.deliverables
            ])
        
        for outcome in outcomes:
            if isinstance(outcome, DeliverableFetchFailed):
                logger.warning(str(outcome))
                result.failures.append(outcome)
            else:
                result.fetched.append(outcome)
        
        if input_data.stage_to_shared_dir:
            result.shared_files = self._copy_to_shared(input_data)
        
        return result
    
    async def _fetch(self, client: httpx.AsyncClient, deliverable: Deliverable, output_directory: Path):
        """Download one deliverable; failures are returned, not raised"""
        destination = output_directory / deliverable.filename
        partial = destination.with_name(destination.name + ".part")
        try:
            async with client.stream("GET", deliverable.url) as response:
                response.raise_for_status()
                with partial.open("wb") as fh:
                    async for chunk in response.aiter_bytes():
                        fh.write(chunk)
            partial.replace(destination)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            partial.unlink(missing_ok=True)
            return DeliverableFetchFailed(deliverable.name, deliverable.url, str(e) or type(e).__name__)
        
        logger.info("Downloaded %s to %s", deliverable.name, destination)
        return destination
    
    def _copy_to_shared(self, input_data: DeliverableRequest) -> List[Path]:
        """Copy tenant data and dashboard templates, overwriting same-named files"""
        shared_dir = input_data.shared_dir
        shared_dir.mkdir(parents=True, exist_ok=True)
        copied = []
        
        for item in sorted(input_data.tenant_data_directory.iterdir()):
            target = shared_dir / item.name
            if item.is_dir():
                shutil.copytree(item, target, dirs_exist_ok=True)
            else:
                shutil.copy2(item, target)
            copied.append(target)
        
        for deliverable in self.deliverables:
            if deliverable.kind != DeliverableKind.DASHBOARD_TEMPLATE:
                continue
            template = input_data.output_directory / deliverable.filename
            if not template.is_file():
                logger.warning("Dashboard template %s not available; not copied", template.name)
                continue
            copied.append(Path(shutil.copy2(template, shared_dir / template.name)))
        
        logger.info("Copied %d items to %s", len(copied), shared_dir)
        return copied
