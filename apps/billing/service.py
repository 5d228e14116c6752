from typing import Dict, List, Tuple
from loguru import logger
from sqlmodel import col
from framework.exceptions.handler import BusinessException
from framework.repository import BaseRepository, UnitOfWork, generate_key
from .models import Feature, SubscriptionPlan, SubscriptionPlanFeature
from .schemas import FeatureCreate, PlanCreate, PlanUpdate

PlanWithFeatures = Tuple[SubscriptionPlan, List[Feature]]


class BillingService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def plans(self) -> BaseRepository[SubscriptionPlan]:
        return self.uow.get_repository(SubscriptionPlan)

    @property
    def features(self) -> BaseRepository[Feature]:
        return self.uow.get_repository(Feature)

    @property
    def plan_features(self) -> BaseRepository[SubscriptionPlanFeature]:
        return self.uow.get_repository(SubscriptionPlanFeature)

    async def _load_features(self, feature_ids: List[str]) -> Dict[str, Feature]:
        if not feature_ids:
            return {}
        found = await self.features.find(col(Feature.id).in_(feature_ids))
        by_id = {feature.id: feature for feature in found}
        missing = [feature_id for feature_id in feature_ids if feature_id not in by_id]
        if missing:
            raise BusinessException(f"Unknown feature id(s): {', '.join(missing)}")
        return by_id

    async def features_of(self, plan_ids: List[str]) -> Dict[str, List[Feature]]:
        """Live features of each plan, keyed by plan id."""
        result: Dict[str, List[Feature]] = {plan_id: [] for plan_id in plan_ids}
        if not plan_ids:
            return result
        links = await self.plan_features.find(col(SubscriptionPlanFeature.subscription_plan_id).in_(plan_ids))
        features = await self.features.find(col(Feature.id).in_(list({link.feature_id for link in links})))
        by_id = {feature.id: feature for feature in features}
        for link in links:
            if link.feature_id in by_id:
                result[link.subscription_plan_id].append(by_id[link.feature_id])
        return result

    async def list_plans(self) -> List[PlanWithFeatures]:
        plans = await self.plans.get_all(order_by="pricing")
        features = await self.features_of([plan.id for plan in plans])
        return [(plan, features[plan.id]) for plan in plans]

    async def get_plan(self, plan_id: str) -> PlanWithFeatures:
        plan = await self.plans.get_required(plan_id)
        features = await self.features_of([plan_id])
        return plan, features[plan_id]

    async def create_plan(self, data: PlanCreate) -> PlanWithFeatures:
        feature_ids = list(dict.fromkeys(data.feature_ids))
        features = await self._load_features(feature_ids)

        plan = SubscriptionPlan(id=generate_key(), type=data.type, pricing=data.pricing)
        await self.plans.add(plan)
        if feature_ids:
            await self.plan_features.add_range([
                SubscriptionPlanFeature(id=generate_key(), subscription_plan_id=plan.id, feature_id=feature_id)
                for feature_id in feature_ids
            ])
        await self.uow.save_changes()
        logger.info(f"Subscription plan {plan.id} created with {len(feature_ids)} feature(s)")
        return plan, [features[feature_id] for feature_id in feature_ids]

    async def update_plan(self, plan_id: str, data: PlanUpdate) -> PlanWithFeatures:
        plan = await self.plans.get_required(plan_id)
        feature_ids = list(dict.fromkeys(data.feature_ids))
        features = await self._load_features(feature_ids)

        plan.type = data.type
        plan.pricing = data.pricing
        plan = await self.plans.update(plan)

        links = await self.plan_features.find_all(subscription_plan_id=plan_id)
        stale = [link for link in links if link.feature_id not in features]
        if stale:
            await self.plan_features.remove_range(stale)
        linked = {link.feature_id for link in links}
        fresh = [
            SubscriptionPlanFeature(id=generate_key(), subscription_plan_id=plan_id, feature_id=feature_id)
            for feature_id in feature_ids if feature_id not in linked
        ]
        if fresh:
            await self.plan_features.add_range(fresh)

        await self.uow.save_changes()
        return plan, [features[feature_id] for feature_id in feature_ids]

    async def delete_plan(self, plan_id: str) -> None:
        await self.plans.soft_delete(plan_id)
        links = await self.plan_features.find_all(subscription_plan_id=plan_id)
        if links:
            await self.plan_features.remove_range(links)
        await self.uow.save_changes()
        logger.info(f"Subscription plan {plan_id} deleted")

    async def list_features(self) -> List[Feature]:
        return await self.features.get_all(order_by="text")

    async def create_feature(self, data: FeatureCreate) -> Feature:
        feature = Feature(id=generate_key(), text=data.text, arabic_text=data.arabic_text)
        await self.features.add(feature)
        await self.uow.save_changes()
        return feature
