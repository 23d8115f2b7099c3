"""Titles and contents of the notifications the system sends.

The product ships in Simplified Chinese; all copy lives here.
"""

import datetime

from django.utils import timezone

from .emitter import Message


def format_local_datetime(value: datetime.datetime) -> str:
    """Format a timestamp as e.g. ``3月15日 14:00`` in the local (UTC+8) timezone."""
    local = timezone.localtime(value)
    return f"{local.month}月{local.day}日 {local:%H:%M}"


def registration_submitted(participant_name: str, event_title: str) -> Message:
    return Message("新的报名申请", f'{participant_name} 报名了您的活动"{event_title}"')


def registration_decided(event_title: str, approved: bool) -> Message:
    if approved:
        return Message("报名通过", f'您报名的活动"{event_title}"已通过审核')
    return Message("报名被拒", f'您报名的活动"{event_title}"报名申请被拒绝')


def event_reminder(event_title: str, start_time: datetime.datetime) -> Message:
    return Message("活动提醒", f'您报名的活动"{event_title}"将于明天（{format_local_datetime(start_time)}）开始')


def review_reminder(event_title: str) -> Message:
    return Message("活动评价提醒", f'您参加的活动"{event_title}"已结束，邀请您分享参与体验和感受')


def event_review(reviewer_name: str, event_title: str, rating: int) -> Message:
    return Message("收到新的活动评价", f'{reviewer_name} 对您的活动"{event_title}"给出了 {rating} 星评价')


def discussion_reply(replier_name: str, event_title: str) -> Message:
    return Message("讨论区新回复", f'{replier_name} 回复了您在活动"{event_title}"中的讨论')


def organizer_application(applicant_name: str, organizer_name: str) -> Message:
    return Message("新的主办方申请", f"{applicant_name} 申请成为主办方（{organizer_name}）")


def organizer_decision(organizer_name: str, approved: bool, admin_notes: str = "") -> Message:
    if approved:
        title = "主办方申请通过"
        content = f"您的主办方申请（{organizer_name}）已通过审核，您现在可以创建和管理活动了"
    else:
        title = "主办方申请未通过"
        content = f"您的主办方申请（{organizer_name}）未通过审核"
    if admin_notes:
        content += f"。管理员备注：{admin_notes}"
    return Message(title, content)


def co_organizer_added(event_title: str) -> Message:
    return Message("成为活动协办方", f'您已被添加为活动"{event_title}"的协办方，现在可以协助管理该活动')


def co_organizer_removed(event_title: str) -> Message:
    return Message("协办方身份已移除", f'您已不再是活动"{event_title}"的协办方')


def event_updated(event_title: str, update_message: str = "") -> Message:
    return Message("活动信息更新", update_message or f'您报名的活动"{event_title}"的信息已更新，请查看最新详情')


def event_cancelled(event_title: str, reason: str = "") -> Message:
    if reason:
        return Message("活动已取消", f'很抱歉，您报名的活动"{event_title}"已被取消。取消原因：{reason}')
    return Message("活动已取消", f'很抱歉，您报名的活动"{event_title}"已被取消')
