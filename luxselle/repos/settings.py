from typing import Optional

from luxselle.core.config import Settings, get_settings
from luxselle.core.enums import DEFAULT_ORG_ID
from luxselle.models.settings import OrgSettings
from luxselle.repos.base import BaseRepo
from luxselle.schemas.settings import OrgSettingsRead, OrgSettingsUpdate


class SettingsRepo(BaseRepo[OrgSettings]):
    """
    One settings record per organisation. When none is stored the
    environment defaults apply, so callers always go through get_effective().
    """
    model = OrgSettings
    entity_name = "Settings"

    def __init__(self, db, organisation_id: str = DEFAULT_ORG_ID, settings: Optional[Settings] = None):
        super().__init__(db, organisation_id)
        self.settings = settings or get_settings()

    async def get_record(self) -> Optional[OrgSettings]:
        result = await self.db.execute(self._scoped())
        return result.scalars().first()

    def _defaults(self) -> OrgSettingsRead:
        return OrgSettingsRead(
            organisation_id=self.organisation_id,
            base_currency="EUR",
            target_margin_pct=self.settings.TARGET_MARGIN_PCT,
            low_stock_threshold=self.settings.LOW_STOCK_THRESHOLD,
            fx_usd_to_eur=self.settings.FX_USD_TO_EUR,
            vat_rate_pct=self.settings.VAT_RATE_PCT,
            receive_sell_markup=self.settings.RECEIVE_SELL_MARKUP,
        )

    async def get_effective(self) -> OrgSettingsRead:
        record = await self.get_record()
        if record is None:
            return self._defaults()
        return OrgSettingsRead.model_validate(record)

    async def upsert(self, patch: OrgSettingsUpdate, actor: Optional[str] = None) -> OrgSettingsRead:
        record = await self.get_record()
        if record is None:
            seed = self._defaults().model_dump(exclude={"organisation_id"})
            record = await self.create(seed, actor=actor)
        await self.set(record.id, patch, actor=actor)
        return OrgSettingsRead.model_validate(record)
