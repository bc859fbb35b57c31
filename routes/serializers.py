def template_json(t):
    return {
        "id": t.id,
        "therapistId": t.therapist_id,
        "dayOfWeek": t.day_of_week,
        "startTime": t.start_time,
        "endTime": t.end_time,
        "sessionDuration": t.session_duration,
        "breakTime": t.break_time,
        "state": t.state,
    }


def slot_json(s):
    return {
        "id": s.id,
        "therapistId": s.therapist_id,
        "templateId": s.template_id,
        "date": s.date.isoformat(),
        "startTime": s.start_time,
        "endTime": s.end_time,
        "isBooked": s.is_booked,
        "bookedBy": s.booked_by,
        "state": s.state,
    }


def booking_json(b):
    return {
        "id": b.id,
        "bookingId": b.booking_ref,
        "patientId": b.patient_id,
        "therapistId": b.therapist_id,
        "timeSlotId": b.slot_id,
        "sessionDate": b.session_date.isoformat(),
        "sessionStartTime": b.session_start_time,
        "sessionEndTime": b.session_end_time,
        "status": b.status,
        "notes": b.notes,
        "cancellationReason": b.cancellation_reason,
        "cancelledBy": b.cancelled_by,
        "cancelledAt": b.cancelled_at.isoformat() if b.cancelled_at else None,
        "createdAt": b.created_at.isoformat() if b.created_at else None,
    }
