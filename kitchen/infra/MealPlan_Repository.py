import logging
from typing import List, Optional

from kitchen.domain.MealPlan import MealPlan
from kitchen.domain.Recipe import utc_now
from kitchen.infra.Document_Store import DocumentStore
from kitchen.infra.paths import MEAL_PLANS
from kitchen.utilities.errors import NotFoundError

logger = logging.getLogger(__name__)


class MealPlanRepository:
    """Owner-scoped persistence for MealPlan documents."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def list(self, owner: str, active: Optional[bool] = None) -> List[MealPlan]:
        """Return the owner's meal plans, latest start date first."""
        filters = {'user': owner}
        if active is not None:
            filters['isActive'] = active
        docs = self.store.find(MEAL_PLANS, **filters)
        docs.sort(key=lambda d: d.get('startDate') or '', reverse=True)
        return [MealPlan.from_dict(d) for d in docs]

    def get(self, owner: str, plan_id: str) -> MealPlan:
        doc = self.store.get(MEAL_PLANS, plan_id)
        if doc is None or doc.get('user') != owner:
            raise NotFoundError("Meal plan", plan_id)
        return MealPlan.from_dict(doc)

    def create(self, plan: MealPlan) -> MealPlan:
        '''Persists a new plan; a plan without meal entries gets one empty entry per day.'''
        if not plan.meals:
            plan.prepopulate()
        plan.id = None
        saved = MealPlan.from_dict(self.store.insert(MEAL_PLANS, plan.to_dict()))
        logger.info("Meal plan created: id=%s name=%r days=%d", saved.id, saved.name, len(saved.meals))
        return saved

    def save(self, plan: MealPlan) -> MealPlan:
        # Ownership is checked again so a stale object cannot move a plan between users
        self.get(plan.user, plan.id)
        plan.touch()
        return MealPlan.from_dict(self.store.replace(MEAL_PLANS, plan.id, plan.to_dict()))

    def update(self, owner: str, plan_id: str, changes: dict) -> MealPlan:
        '''Applies camelCase field changes (already allow-listed by the caller).'''
        current = self.get(owner, plan_id)
        doc = current.to_dict()
        doc.update(changes)
        doc.update({'id': plan_id, 'user': owner, 'createdAt': current.created_at, 'updatedAt': utc_now()})
        updated = MealPlan.from_dict(doc)
        return MealPlan.from_dict(self.store.replace(MEAL_PLANS, plan_id, updated.to_dict()))

    def delete(self, owner: str, plan_id: str):
        self.get(owner, plan_id)
        self.store.delete(MEAL_PLANS, plan_id)
        logger.info("Meal plan deleted: id=%s", plan_id)
