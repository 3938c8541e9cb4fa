from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from status_monitor.db.models import DeviceState, DeviceTransition, StatusReport

# Repositories only flush. The caller owns the transaction so that a report,
# its device row and any transition land in one commit.


class ReportRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, **kwargs: object) -> StatusReport:
        report = StatusReport(**kwargs)
        self.session.add(report)
        await self.session.flush()
        return report

    async def latest_for_device(self, device_id: str, real_only: bool = False) -> StatusReport | None:
        stmt = select(StatusReport).where(StatusReport.device_id == device_id)
        if real_only:
            stmt = stmt.where(StatusReport.is_synthetic.is_(False))
        stmt = stmt.order_by(StatusReport.server_timestamp.desc(), StatusReport.id.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_recent(self, limit: int, device_id: str | None = None) -> list[StatusReport]:
        stmt = select(StatusReport)
        if device_id:
            stmt = stmt.where(StatusReport.device_id == device_id)
        stmt = stmt.order_by(StatusReport.server_timestamp.desc(), StatusReport.id.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def stats(self) -> dict:
        stmt = select(
            func.count(StatusReport.id),
            func.min(StatusReport.server_timestamp),
            func.max(StatusReport.server_timestamp),
            func.coalesce(func.sum(case((StatusReport.is_boot.is_(True), 1), else_=0)), 0),
        )
        total, first_seen, last_seen, boot_count = (await self.session.execute(stmt)).one()
        return {
            "total_updates": total,
            "first_seen": first_seen,
            "last_seen": last_seen,
            "boot_count": int(boot_count),
        }


class DeviceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, **kwargs: object) -> DeviceState:
        device = DeviceState(**kwargs)
        self.session.add(device)
        await self.session.flush()
        return device

    async def get(self, device_id: str, for_update: bool = False) -> DeviceState | None:
        return await self.session.get(
            DeviceState, device_id, with_for_update=for_update, populate_existing=True
        )

    async def most_recent(self) -> DeviceState | None:
        stmt = select(DeviceState).order_by(DeviceState.last_seen.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_all(self, status: str | None = None) -> list[DeviceState]:
        stmt = select(DeviceState)
        if status:
            stmt = stmt.where(DeviceState.status == status)
        stmt = stmt.order_by(DeviceState.last_seen.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class TransitionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self, device_id: str, from_status: str, to_status: str, source: str, occurred_at: datetime,
    ) -> DeviceTransition:
        transition = DeviceTransition(
            device_id=device_id,
            from_status=from_status,
            to_status=to_status,
            source=source,
            occurred_at=occurred_at,
        )
        self.session.add(transition)
        await self.session.flush()
        return transition

    async def list_recent(self, limit: int, device_id: str | None = None) -> list[DeviceTransition]:
        stmt = select(DeviceTransition)
        if device_id:
            stmt = stmt.where(DeviceTransition.device_id == device_id)
        stmt = stmt.order_by(DeviceTransition.occurred_at.desc(), DeviceTransition.id.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
