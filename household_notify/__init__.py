"""household-notify - push notifications for shared household tasks."""
