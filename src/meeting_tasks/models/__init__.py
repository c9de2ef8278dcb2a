"""
Data models for the meeting task tool.

Wire models use camelCase aliases and ignore unknown fields.
"""

from .user import User, AuthUser, AuthSession
from .team import (
    Team,
    TeamMember,
    TeamWithMembers,
    TeamRole,
    TeamInvite,
    InviteType,
    EmailInvite,
    InviteLink,
    InviteDetails,
    ViewMode,
)
from .task import (
    Task,
    TaskAssignee,
    TaskStatus,
    TaskPriority,
    TaskFilters,
    CreateTaskRequest,
    UpdateTaskRequest,
)
from .meeting import Meeting, MeetingWithTasks, CreateMeetingRequest
from .contact import Contact, ContactStats, ContactWithStats, CreateContactRequest
from .category import Category, CreateCategoryRequest, UpdateCategoryRequest
from .goal import Goal, GoalType, CreateGoalRequest, UpdateGoalRequest, build_goal_tree

__all__ = [
    'User',
    'AuthUser',
    'AuthSession',
    'Team',
    'TeamMember',
    'TeamWithMembers',
    'TeamRole',
    'TeamInvite',
    'InviteType',
    'EmailInvite',
    'InviteLink',
    'InviteDetails',
    'ViewMode',
    'Task',
    'TaskAssignee',
    'TaskStatus',
    'TaskPriority',
    'TaskFilters',
    'CreateTaskRequest',
    'UpdateTaskRequest',
    'Meeting',
    'MeetingWithTasks',
    'CreateMeetingRequest',
    'Contact',
    'CreateContactRequest',
    'ContactStats',
    'ContactWithStats',
    'Category',
    'CreateCategoryRequest',
    'UpdateCategoryRequest',
    'Goal',
    'GoalType',
    'CreateGoalRequest',
    'UpdateGoalRequest',
    'build_goal_tree',
]
